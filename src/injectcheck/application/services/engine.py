"""Analysis engine: main facade of the DI analysis pipeline.

Graph Builder -> Detectors (priority order) -> Deduplicator -> Validator
-> Accuracy Estimator -> AnalysisResult.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Self

from injectcheck.application.detectors import detectors_from_config
from injectcheck.application.graph.builder import GraphBuilder
from injectcheck.application.graph.cache import ResolutionCache
from injectcheck.application.services.accuracy import AccuracyEstimator
from injectcheck.application.services.basic_detection import basic_issue_detection
from injectcheck.application.services.deduplicator import deduplicate, detect_with_exclusions
from injectcheck.application.services.validator import IssueValidator
from injectcheck.domain.exceptions import (
    AnalysisAlreadyRunningError,
    AnalysisCancelled,
    NotDIProjectError,
)
from injectcheck.domain.model.configuration import AnalysisConfig
from injectcheck.domain.model.graph import DependencyGraph
from injectcheck.domain.model.result import AnalysisMetadata, AnalysisResult

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.issue import Issue
    from injectcheck.domain.ports.detector import DetectorProtocol
    from injectcheck.domain.ports.progress import ProgressProtocol
    from injectcheck.domain.ports.source import ComponentSourceProtocol, SourceReaderProtocol
    from injectcheck.domain.ports.type_oracle import SupertypeOracle

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "project"


def attach_issues(graph: DependencyGraph, issues: Sequence[Issue]) -> DependencyGraph:
    """Copy of graph with each node carrying the issues that implicate it."""
    by_node: dict[str, list[Issue]] = {}
    for issue in issues:
        for name in issue.affected_components():
            by_node.setdefault(name, []).append(issue)
    if not by_node:
        return graph
    nodes = tuple(
        replace(node, issues=tuple(by_node[node.id])) if node.id in by_node else node
        for node in graph.nodes
    )
    return DependencyGraph(nodes=nodes, edges=graph.edges)


class _Phases:
    """Progress reporting and cooperative cancellation between phases."""

    def __init__(
        self,
        progress: ProgressProtocol | None,
        cancel_check: Callable[[], bool] | None,
    ) -> None:
        self._progress = progress
        self._cancel_check = cancel_check

    def enter(self, name: str, fraction: float) -> None:
        """Raise AnalysisCancelled if requested, else report progress."""
        if self._cancel_check is not None and self._cancel_check():
            logger.info("Analysis cancelled before %s", name)
            raise AnalysisCancelled(name)
        if self._progress is not None:
            self._progress.report(fraction, name)

    def done(self) -> None:
        """Report completion. Never cancels."""
        if self._progress is not None:
            self._progress.report(1.0, "Analysis complete")


class AnalysisEngine:
    """Runs the DI analysis pipeline.

    One analysis at a time per instance: a second concurrent analyze()
    raises AnalysisAlreadyRunningError. Threads that need parallel runs
    use separate engines.

    The engine owns a ResolutionCache. Call clear_caches() when switching
    to an unrelated component set.

    Factory methods:
    - with_defaults(): all detectors, default configuration
    - from_config(): detectors and validator from AnalysisConfig

    Example:
        engine = AnalysisEngine.with_defaults()
        result = engine.analyze(components, "my-app")
        if result.has_errors:
            print(ConsoleReporter().report(result))
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        *,
        detectors: Sequence[DetectorProtocol] | None = None,
        source_reader: SourceReaderProtocol | None = None,
        oracle: SupertypeOracle | None = None,
    ) -> None:
        """Initialize engine with dependencies.

        Args:
            config: Analysis configuration. Defaults if None.
            detectors: Detectors in priority order. From config if None.
            source_reader: Reader used by the validator for commented-out code
            oracle: Type-system oracle for inheritance-based resolution
        """
        self._config = config or AnalysisConfig()
        self._cache = ResolutionCache()
        self._builder = GraphBuilder(self._cache)
        if detectors is None:
            detectors = detectors_from_config(self._config, oracle)
        self._detectors = tuple(detectors)
        self._validator = IssueValidator(self._config, source_reader)
        self._estimator = AccuracyEstimator()
        self._running = threading.Lock()
        self._last_result: AnalysisResult | None = None

    @classmethod
    def with_defaults(cls) -> Self:
        """Engine with default configuration and all detectors."""
        return cls()

    @classmethod
    def from_config(
        cls,
        config: AnalysisConfig,
        *,
        source_reader: SourceReaderProtocol | None = None,
        oracle: SupertypeOracle | None = None,
    ) -> Self:
        """Engine configured from AnalysisConfig."""
        return cls(config, source_reader=source_reader, oracle=oracle)

    @property
    def config(self) -> AnalysisConfig:
        """Configuration in use."""
        return self._config

    @property
    def cache(self) -> ResolutionCache:
        """Resolution cache owned by this engine."""
        return self._cache

    @property
    def is_running(self) -> bool:
        """An analysis is in flight."""
        return self._running.locked()

    @property
    def last_result(self) -> AnalysisResult | None:
        """Result of the most recent completed analysis."""
        return self._last_result

    def clear_caches(self) -> None:
        """Drop type-match and provider-lookup caches."""
        self._cache.clear()
        logger.debug("Resolution caches cleared")

    def run(
        self,
        source: ComponentSourceProtocol,
        *,
        progress: ProgressProtocol | None = None,
        cancel_check: Callable[[], bool] | None = None,
    ) -> AnalysisResult:
        """Analyse a project supplied through a component source.

        Raises:
            NotDIProjectError: Source is not a DI project
            AnalysisAlreadyRunningError: Another analysis is in flight
        """
        if not source.is_di_project():
            raise NotDIProjectError(source.project_name)
        return self.analyze(
            source.load_components(),
            source.project_name,
            progress=progress,
            cancel_check=cancel_check,
        )

    def analyze(
        self,
        components: Sequence[Component],
        project_name: str = DEFAULT_PROJECT_NAME,
        *,
        progress: ProgressProtocol | None = None,
        cancel_check: Callable[[], bool] | None = None,
    ) -> AnalysisResult:
        """Run the full pipeline on a component list.

        Args:
            components: Extracted components in stable order
            project_name: Project identifier for the result
            progress: Receives progress between phases
            cancel_check: Polled between phases; True cancels

        Returns:
            AnalysisResult

        Raises:
            AnalysisAlreadyRunningError: Another analysis is in flight
            AnalysisCancelled: cancel_check returned True
        """
        if not self._running.acquire(blocking=False):
            raise AnalysisAlreadyRunningError
        try:
            result = self._analyze(tuple(components), project_name, _Phases(progress, cancel_check))
        finally:
            self._running.release()
        self._last_result = result
        return result

    def detect_issues(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
    ) -> tuple[tuple[Issue, ...], bool]:
        """Priority pipeline, falling back to basic detection on failure.

        Returns:
            (deduplicated issues, whether the fallback was used)
        """
        try:
            return detect_with_exclusions(self._detectors, components, graph), False
        except Exception:
            logger.exception("Issue detection failed, falling back to basic detection")
            return deduplicate(basic_issue_detection(components, graph)), True

    def _analyze(
        self,
        components: tuple[Component, ...],
        project_name: str,
        phases: _Phases,
    ) -> AnalysisResult:
        start = time.perf_counter()
        logger.info("Analysing %s: %d components", project_name, len(components))

        phases.enter("Building dependency graph", 0.1)
        graph = self._builder.build(components)

        phases.enter("Detecting issues", 0.3)
        detection_start = time.perf_counter()
        issues, used_fallback = self.detect_issues(components, graph)
        detection_ms = (time.perf_counter() - detection_start) * 1000

        phases.enter("Validating issues", 0.7)
        validation_start = time.perf_counter()
        issues = self._validator.validate_issues(issues, components)
        validation_ms = (time.perf_counter() - validation_start) * 1000

        phases.enter("Estimating accuracy", 0.9)
        metrics = self._estimator.calculate_metrics(
            issues,
            components,
            validation_enabled=self._config.validation_enabled,
        )

        analysis_ms = (time.perf_counter() - start) * 1000
        phases.done()
        logger.info(
            "Analysis of %s finished: %d issues in %.1f ms",
            project_name,
            len(issues),
            analysis_ms,
        )

        return AnalysisResult(
            components=components,
            graph=attach_issues(graph, issues),
            issues=issues,
            timestamp=int(time.time() * 1000),
            project_name=project_name,
            metadata=AnalysisMetadata(
                analysis_time_ms=analysis_ms,
                detection_time_ms=detection_ms,
                validation_time_ms=validation_ms,
                components_analyzed=len(components),
                used_fallback_detection=used_fallback,
                top_issue_count=self._config.top_issue_count,
            ),
            accuracy_metrics=metrics,
        )
