"""Accuracy metrics derived from validated issues."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from injectcheck.domain.model.enums import AccuracyTrend, IssueType


@dataclass(frozen=True, slots=True)
class ValidationDetails:
    """Validation outcome for one issue type.

    Attributes:
        total_detected: Issues of this type after filtering
        validated: Issues with a true- or false-positive verdict
        false_positives: Confirmed false positives
        average_confidence: Mean confidence over all issues of this type
    """

    total_detected: int
    validated: int
    false_positives: int
    average_confidence: float

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if min(self.total_detected, self.validated, self.false_positives) < 0:
            raise ValueError("counts must be non-negative")
        if not 0.0 <= self.average_confidence <= 1.0:
            raise ValueError(f"average_confidence must be in [0, 1], got {self.average_confidence}")

    @property
    def accuracy(self) -> float:
        """Share of validated issues that are not false positives."""
        if self.validated == 0:
            return 1.0
        return (self.validated - self.false_positives) / self.validated


@dataclass(frozen=True, slots=True)
class AccuracyMetrics:
    """Precision/recall estimate of one analysis run.

    Invariants (FAIL-FIRST):
    - all counts >= 0
    - average_confidence_score in [0, 1]
    """

    total_validated_issues: int = 0
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    expected_issues: int = 0
    validation_enabled: bool = True
    average_confidence_score: float = 1.0
    per_type_details: Mapping[IssueType, ValidationDetails] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        counts = (
            self.total_validated_issues,
            self.true_positives,
            self.false_positives,
            self.false_negatives,
            self.expected_issues,
        )
        if min(counts) < 0:
            raise ValueError(f"counts must be non-negative, got {counts}")
        if not 0.0 <= self.average_confidence_score <= 1.0:
            raise ValueError(
                f"average_confidence_score must be in [0, 1], got {self.average_confidence_score}"
            )

    @classmethod
    def disabled(cls) -> AccuracyMetrics:
        """Metrics for a run with validation turned off."""
        return cls(validation_enabled=False)

    @property
    def precision(self) -> float:
        """tp / (tp + fp); 1.0 when nothing was reported."""
        denominator = self.true_positives + self.false_positives
        if denominator == 0:
            return 1.0
        return self.true_positives / denominator

    @property
    def recall(self) -> float:
        """tp / (tp + fn); 1.0 when nothing was expected."""
        denominator = self.true_positives + self.false_negatives
        if denominator == 0:
            return 1.0
        return self.true_positives / denominator

    @property
    def f1_score(self) -> float:
        """Harmonic mean of precision and recall; 0 when both are 0."""
        p, r = self.precision, self.recall
        if p + r == 0:
            return 0.0
        return 2 * p * r / (p + r)


@dataclass(frozen=True, slots=True)
class AccuracyTrendReport:
    """Comparison of two runs' accuracy."""

    current: AccuracyMetrics
    previous: AccuracyMetrics | None
    precision_change: float
    recall_change: float
    f1_change: float
    trend: AccuracyTrend
