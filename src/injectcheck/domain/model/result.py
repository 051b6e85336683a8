"""Analysis result and derived summary."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from injectcheck.domain.model.enums import IssueType, Severity, ValidationStatus

if TYPE_CHECKING:
    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.graph import DependencyGraph
    from injectcheck.domain.model.issue import Issue
    from injectcheck.domain.model.metrics import AccuracyMetrics


@dataclass(frozen=True, slots=True)
class AnalysisMetadata:
    """Timing and bookkeeping of one run.

    Attributes:
        analysis_time_ms: Whole pipeline
        detection_time_ms: Issue detectors including deduplication
        validation_time_ms: Issue validator
        components_analyzed: Components given to the engine
        used_fallback_detection: Advanced detectors failed, basic detection ran
        top_issue_count: Default preview length of summary()
    """

    analysis_time_ms: float = 0.0
    detection_time_ms: float = 0.0
    validation_time_ms: float = 0.0
    components_analyzed: int = 0
    used_fallback_detection: bool = False
    top_issue_count: int = 5

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if min(self.analysis_time_ms, self.detection_time_ms, self.validation_time_ms) < 0:
            raise ValueError("times must be non-negative")
        if self.components_analyzed < 0:
            raise ValueError(f"components_analyzed must be >= 0, got {self.components_analyzed}")
        if self.top_issue_count < 1:
            raise ValueError(f"top_issue_count must be >= 1, got {self.top_issue_count}")


@dataclass(frozen=True, slots=True)
class AnalysisSummary:
    """Counts and previews derived from an AnalysisResult."""

    total_components: int
    total_dependencies: int
    total_issues: int
    error_count: int
    warning_count: int
    info_count: int
    has_cycles: bool
    analysis_time_ms: float
    issue_breakdown: Mapping[IssueType, int]
    top_issues: tuple[Issue, ...]
    components_with_issues: int
    accuracy_metrics: AccuracyMetrics

    @property
    def accuracy_percentage(self) -> float:
        """Confirmed true positives over all issues, in percent."""
        if self.total_issues == 0:
            return 100.0
        return self.accuracy_metrics.true_positives / self.total_issues * 100

    @property
    def false_positive_rate(self) -> float:
        """Confirmed false positives over all issues, in percent."""
        if self.total_issues == 0:
            return 0.0
        return self.accuracy_metrics.false_positives / self.total_issues * 100

    @property
    def statistical_error(self) -> float:
        """|actual - expected| / expected, in percent. 0 when nothing expected."""
        expected = self.accuracy_metrics.expected_issues
        if expected == 0:
            return 0.0
        return abs(self.total_issues - expected) / expected * 100


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Final output of one analysis run.

    Attributes:
        components: Components analysed
        graph: Dependency graph
        issues: Deduplicated, validated, ordered issues
        timestamp: Unix time in milliseconds
        project_name: Project identifier
        metadata: Timings and bookkeeping
        accuracy_metrics: Self-assessment of the run
    """

    components: tuple[Component, ...]
    graph: DependencyGraph
    issues: tuple[Issue, ...]
    timestamp: int
    project_name: str
    metadata: AnalysisMetadata
    accuracy_metrics: AccuracyMetrics

    @property
    def has_errors(self) -> bool:
        """Any ERROR-severity issue."""
        return any(issue.severity is Severity.ERROR for issue in self.issues)

    @property
    def has_warnings(self) -> bool:
        """Any WARNING-severity issue."""
        return any(issue.severity is Severity.WARNING for issue in self.issues)

    def issues_by_type(self) -> Mapping[IssueType, tuple[Issue, ...]]:
        """Issues grouped by type, first-appearance order."""
        grouped: dict[IssueType, list[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.type, []).append(issue)
        return MappingProxyType({k: tuple(v) for k, v in grouped.items()})

    def issues_by_severity(self) -> Mapping[Severity, tuple[Issue, ...]]:
        """Issues grouped by severity."""
        grouped: dict[Severity, list[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.severity, []).append(issue)
        return MappingProxyType({k: tuple(v) for k, v in grouped.items()})

    def issues_with_status(self, status: ValidationStatus) -> tuple[Issue, ...]:
        """Issues carrying the given validation status."""
        return tuple(issue for issue in self.issues if issue.validation_status is status)

    def summary(self, top_n: int | None = None) -> AnalysisSummary:
        """Derive summary counts and a top-N preview.

        Args:
            top_n: Preview length; metadata.top_issue_count when None
        """
        if top_n is None:
            top_n = self.metadata.top_issue_count
        by_severity = self.issues_by_severity()
        breakdown = {t: len(v) for t, v in self.issues_by_type().items()}
        affected: set[str] = set()
        for issue in self.issues:
            affected.update(issue.affected_components())

        return AnalysisSummary(
            total_components=len(self.components),
            total_dependencies=self.graph.dependency_edge_count,
            total_issues=len(self.issues),
            error_count=len(by_severity.get(Severity.ERROR, ())),
            warning_count=len(by_severity.get(Severity.WARNING, ())),
            info_count=len(by_severity.get(Severity.INFO, ())),
            has_cycles=self.graph.has_cycles(),
            analysis_time_ms=self.metadata.analysis_time_ms,
            issue_breakdown=MappingProxyType(breakdown),
            top_issues=self.issues[:top_n],
            components_with_issues=len(affected),
            accuracy_metrics=self.accuracy_metrics,
        )
