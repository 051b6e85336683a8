"""Fluent API (DSL) for dependency-injection checks in test suites.

Example:
    check = InjectCheck(components, project_name="my-app")
    check.issues().of_type(IssueType.CIRCULAR_DEPENDENCY).assert_none()
    check.assert_clean()
"""

from __future__ import annotations

import fnmatch
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from injectcheck.application.reporters.console import ConsoleReporter
from injectcheck.application.services.engine import DEFAULT_PROJECT_NAME, AnalysisEngine
from injectcheck.domain.exceptions import DependencyIssuesError
from injectcheck.domain.model.enums import Severity, ValidationStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.configuration import AnalysisConfig
    from injectcheck.domain.model.enums import IssueType
    from injectcheck.domain.model.issue import Issue
    from injectcheck.domain.model.result import AnalysisResult
    from injectcheck.domain.ports.reporter import ReporterProtocol


class InjectCheck:
    """Entry point for DI analysis in tests.

    The analysis runs lazily on first use and is reused afterwards.

    Attributes:
        _components: Components under analysis
        _engine: Engine running the pipeline
    """

    def __init__(
        self,
        components: Iterable[Component],
        config: AnalysisConfig | None = None,
        *,
        project_name: str = DEFAULT_PROJECT_NAME,
        engine: AnalysisEngine | None = None,
    ) -> None:
        """Initialize checker.

        Args:
            components: Extracted components to analyse
            config: Analysis configuration. Ignored when engine is given.
            project_name: Project identifier for the result
            engine: Preconfigured engine. Built from config if None.

        Raises:
            TypeError: If components is None
        """
        if components is None:
            raise TypeError("components must not be None")
        self._components = tuple(components)
        self._project_name = project_name
        self._engine = engine or AnalysisEngine(config)
        self._result: AnalysisResult | None = None

    @property
    def result(self) -> AnalysisResult:
        """Analysis result, computed on first access."""
        if self._result is None:
            self._result = self._engine.analyze(self._components, self._project_name)
        return self._result

    def issues(self) -> IssueQuery:
        """Start issue query.

        Returns:
            IssueQuery for chaining filters
        """
        return IssueQuery(_issues=self.result.issues)

    def report(self, reporter: ReporterProtocol | None = None) -> str:
        """Formatted report of the analysis. ConsoleReporter if None."""
        return (reporter or ConsoleReporter()).report(self.result)

    def assert_clean(self, min_severity: Severity = Severity.ERROR) -> None:
        """Raise if any issue is at least as severe as min_severity.

        Raises:
            DependencyIssuesError: If such issues exist
        """
        self.issues().at_least(min_severity).assert_none()


@dataclass(frozen=True, slots=True)
class IssueQuery:
    """Immutable query over analysis issues.

    Filters chain; execution happens in execute() and the assertions.
    """

    _issues: tuple[Issue, ...]
    _filters: tuple[Callable[[Issue], bool], ...] = ()

    def _with_filter(self, predicate: Callable[[Issue], bool]) -> IssueQuery:
        return IssueQuery(_issues=self._issues, _filters=(*self._filters, predicate))

    def of_type(self, *issue_types: IssueType) -> IssueQuery:
        """Keep issues of any of the given types."""
        wanted = frozenset(issue_types)
        return self._with_filter(lambda issue: issue.type in wanted)

    def at_least(self, severity: Severity) -> IssueQuery:
        """Keep issues at least as severe as severity."""
        return self._with_filter(lambda issue: issue.severity.rank <= severity.rank)

    def affecting(self, pattern: str) -> IssueQuery:
        """Keep issues implicating a component matching a glob pattern."""
        return self._with_filter(
            lambda issue: any(
                fnmatch.fnmatchcase(name, pattern) for name in issue.affected_components()
            )
        )

    def with_status(self, status: ValidationStatus) -> IssueQuery:
        """Keep issues with the given validation status."""
        return self._with_filter(lambda issue: issue.validation_status is status)

    def confirmed(self) -> IssueQuery:
        """Keep issues the validator confirmed as true positives."""
        return self.with_status(ValidationStatus.VALIDATED_TRUE_POSITIVE)

    def min_confidence(self, threshold: float) -> IssueQuery:
        """Keep issues with confidence at or above threshold.

        Raises:
            ValueError: If threshold is outside [0, 1]
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        return self._with_filter(lambda issue: issue.confidence_score >= threshold)

    def execute(self) -> tuple[Issue, ...]:
        """Issues matching all filters, in result order."""
        matched: Iterable[Issue] = self._issues
        for predicate in self._filters:
            matched = filter(predicate, matched)
        return tuple(matched)

    def count(self) -> int:
        """Number of matching issues."""
        return len(self.execute())

    def is_empty(self) -> bool:
        """No issue matches."""
        return self.count() == 0

    def assert_none(self) -> None:
        """Raise if any issue matches.

        Raises:
            DependencyIssuesError: If any issue matches
        """
        matched = self.execute()
        if matched:
            raise DependencyIssuesError(matched)
