"""Issue entity and its typed detail payloads.

Each issue type carries its own payload class instead of an open metadata
map. An issue with a payload that does not belong to its type is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TypeAlias

from injectcheck.domain.model.enums import IssueType, Severity, ValidationStatus


@dataclass(frozen=True, slots=True)
class CircularDependencyDetails:
    """Cycle or strongly connected cluster.

    Attributes:
        cycle_length: Number of nodes in the cycle (or SCC members)
        cycle_path: Node ids along the cycle
        affected_components: Fully qualified component names
        strongly_connected: True for an SCC finding, False for a single cycle
    """

    cycle_length: int
    cycle_path: tuple[str, ...]
    affected_components: tuple[str, ...]
    strongly_connected: bool = False

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.cycle_length < 1:
            raise ValueError(f"cycle_length must be >= 1, got {self.cycle_length}")

    def affected(self) -> tuple[str, ...]:
        """Component names this payload implicates."""
        return self.affected_components


@dataclass(frozen=True, slots=True)
class AmbiguousProviderDetails:
    """Several providers compete for one type.

    Attributes:
        provided_type: Contested type
        is_named_conflict: Conflict is a qualifier collision (not unqualified duplicates)
        provider_count: Number of competing providers
        providers: Fully qualified provider method paths
        named_qualifier: Colliding qualifier when is_named_conflict
        provider_components: Fully qualified names of the owning components
    """

    provided_type: str
    is_named_conflict: bool
    provider_count: int
    providers: tuple[str, ...]
    named_qualifier: str | None = None
    provider_components: tuple[str, ...] = ()

    def affected(self) -> tuple[str, ...]:
        """Component names this payload implicates."""
        return self.provider_components


@dataclass(frozen=True, slots=True)
class UnresolvedDependencyDetails:
    """No provider satisfies a dependency.

    Attributes:
        target_type: Requested type
        property_name: Injection point name
        is_named: Requested with a qualifier
        named_qualifier: Requested qualifier
        consumer_component: Fully qualified consumer name
        near_misses: Provider descriptions that almost match
    """

    target_type: str
    property_name: str
    is_named: bool
    named_qualifier: str | None
    consumer_component: str
    near_misses: tuple[str, ...] = ()

    def affected(self) -> tuple[str, ...]:
        """Component names this payload implicates."""
        return (self.consumer_component,)


@dataclass(frozen=True, slots=True)
class SingletonConflictDetails:
    """Several providers for one singleton key.

    Attributes:
        conflicting_type: Type of the key
        named_qualifier: Qualifier of the key
        providers: Fully qualified provider method paths
        singleton_count: How many of them are singleton-scoped
        provider_components: Fully qualified names of the owning components
    """

    conflicting_type: str
    named_qualifier: str | None
    providers: tuple[str, ...]
    singleton_count: int
    provider_components: tuple[str, ...] = ()

    @property
    def provider_count(self) -> int:
        """Number of conflicting providers."""
        return len(self.providers)

    def affected(self) -> tuple[str, ...]:
        """Component names this payload implicates."""
        return self.provider_components


@dataclass(frozen=True, slots=True)
class LifecycleMismatchDetails:
    """Singleton-scoped consumer receives a non-singleton value.

    Attributes:
        dependency_type: Requested type
        consumer_component: Fully qualified consumer name
        property_name: Injection point name
        non_singleton_providers: Offending provider method paths
    """

    dependency_type: str
    consumer_component: str
    property_name: str
    non_singleton_providers: tuple[str, ...]

    def affected(self) -> tuple[str, ...]:
        """Component names this payload implicates."""
        return (self.consumer_component,)


@dataclass(frozen=True, slots=True)
class QualifierMismatchDetails:
    """Requested qualifier is not provided for the type.

    Attributes:
        dependency_type: Requested type
        requested_qualifier: Qualifier that was not found
        consumer_component: Fully qualified consumer name
        property_name: Injection point name
        available_qualifiers: Qualifiers the type is provided under
        suggestions: Close matches, nearest first
    """

    dependency_type: str
    requested_qualifier: str | None
    consumer_component: str
    property_name: str
    available_qualifiers: tuple[str, ...]
    suggestions: tuple[str, ...] = ()

    def affected(self) -> tuple[str, ...]:
        """Component names this payload implicates."""
        return (self.consumer_component,)


IssueDetails: TypeAlias = (
    CircularDependencyDetails
    | AmbiguousProviderDetails
    | UnresolvedDependencyDetails
    | SingletonConflictDetails
    | LifecycleMismatchDetails
    | QualifierMismatchDetails
)

_DETAILS_BY_TYPE: dict[IssueType, tuple[type, ...]] = {
    IssueType.CIRCULAR_DEPENDENCY: (CircularDependencyDetails,),
    IssueType.AMBIGUOUS_PROVIDER: (AmbiguousProviderDetails,),
    IssueType.UNRESOLVED_DEPENDENCY: (UnresolvedDependencyDetails,),
    IssueType.SINGLETON_VIOLATION: (SingletonConflictDetails, LifecycleMismatchDetails),
    IssueType.NAMED_QUALIFIER_MISMATCH: (QualifierMismatchDetails,),
    IssueType.MISSING_COMPONENT_ANNOTATION: (),
}


@dataclass(frozen=True, slots=True)
class Issue:
    """Detected DI problem.

    Attributes:
        type: Issue type
        severity: ERROR/WARNING/INFO
        message: Human-readable message
        component_name: Component(s) the issue is reported against
        source_location: Source location, if known
        suggested_fix: Fix suggestion
        details: Typed payload for this issue type
        validation_status: Result of re-validation
        confidence_score: Estimated probability of a true positive, in [0, 1]
    """

    type: IssueType
    severity: Severity
    message: str
    component_name: str
    source_location: str | None = None
    suggested_fix: str | None = None
    details: IssueDetails | None = None
    validation_status: ValidationStatus = ValidationStatus.NOT_VALIDATED
    confidence_score: float = 1.0

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.message:
            raise ValueError("message must not be empty")
        if not 0.0 <= self.confidence_score <= 1.0:
            raise ValueError(f"confidence_score must be in [0, 1], got {self.confidence_score}")
        if self.details is not None and not isinstance(self.details, _DETAILS_BY_TYPE[self.type]):
            raise TypeError(
                f"{type(self.details).__name__} is not a payload for {self.type.name}"
            )

    @property
    def is_validated(self) -> bool:
        """Validator reached a verdict (true or false positive)."""
        return self.validation_status in (
            ValidationStatus.VALIDATED_TRUE_POSITIVE,
            ValidationStatus.VALIDATED_FALSE_POSITIVE,
        )

    def affected_components(self) -> tuple[str, ...]:
        """Component names implicated by this issue.

        Uses the payload when present, else splits component_name on ", ".
        """
        if self.details is not None:
            affected = self.details.affected()
            if affected:
                return affected
        return tuple(name for name in self.component_name.split(", ") if name)

    def with_validation(self, status: ValidationStatus, confidence: float) -> Issue:
        """Copy with validation verdict applied."""
        return replace(self, validation_status=status, confidence_score=confidence)

    def __str__(self) -> str:
        """Format issue for display."""
        lines = [f"[{self.severity.name}] {self.type.name}: {self.message}"]
        lines.append(f"  component: {self.component_name}")
        if self.suggested_fix:
            lines.append(f"  fix: {self.suggested_fix}")
        return "\n".join(lines)
