"""Analysis configuration.

User-provided, immutable. Heuristic policy lives here as overridable data
rather than hard-coded constants.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SUSPICIOUS_PROVIDER_NAMES: tuple[str, ...] = (
    "commented",
    "temp",
    "test",
    "disabled",
    "old",
)


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Configuration DTO with FAIL-FIRST validation.

    Attributes:
        validation_enabled: Re-validate issues and score confidence.
        minimum_confidence_threshold: Issues below this are dropped
            (confirmed false positives are always kept).
        suspicious_provider_names: Provider method-name fragments treated
            as inactive (case-insensitive substring match).
        ignored_component_names: Components (simple or fully qualified
            name) whose providers are never considered.
        strict_singleton_conflicts: Also flag several non-singleton
            providers for one singleton key.
        top_issue_count: Number of issues previewed in the summary.
    """

    validation_enabled: bool = True
    minimum_confidence_threshold: float = 0.3
    suspicious_provider_names: tuple[str, ...] = DEFAULT_SUSPICIOUS_PROVIDER_NAMES
    ignored_component_names: frozenset[str] = frozenset()
    strict_singleton_conflicts: bool = True
    top_issue_count: int = 5

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not 0.0 <= self.minimum_confidence_threshold <= 1.0:
            raise ValueError(
                "minimum_confidence_threshold must be in [0, 1], "
                f"got {self.minimum_confidence_threshold}"
            )
        if self.top_issue_count < 1:
            raise ValueError(f"top_issue_count must be >= 1, got {self.top_issue_count}")
        for name in self.suspicious_provider_names:
            if not name:
                raise ValueError("suspicious_provider_names must not contain empty strings")
