"""Tests for application/services/engine.py.

Tests:
- Phase order and progress reporting
- Cancellation between phases
- Single-flight guard
- Fallback detection when a detector raises
- Component-source entry point
"""

from collections.abc import Sequence

import pytest

from injectcheck.application.services.basic_detection import FALLBACK_COMPONENT_NAME
from injectcheck.application.services.engine import (
    DEFAULT_PROJECT_NAME,
    AnalysisEngine,
    attach_issues,
)
from injectcheck.domain.exceptions import (
    AnalysisAlreadyRunningError,
    AnalysisCancelled,
    NotDIProjectError,
)
from injectcheck.domain.model.component import Component
from injectcheck.domain.model.configuration import AnalysisConfig
from injectcheck.domain.model.enums import IssueType, ValidationStatus
from injectcheck.domain.model.graph import DependencyGraph
from injectcheck.domain.model.issue import Issue
from injectcheck.infrastructure.component_source import StaticComponentSource
from tests.factories import make_component, make_graph, make_issue, make_service

CYCLE = (make_service("A", "B"), make_service("B", "A"))


class RecordingProgress:
    """Progress sink remembering every report."""

    def __init__(self) -> None:
        self.reports: list[tuple[float, str]] = []

    def report(self, fraction: float, text: str) -> None:
        self.reports.append((fraction, text))


class ReentrantProgress:
    """Progress sink that starts a second analysis on the same engine."""

    def __init__(self, engine: AnalysisEngine) -> None:
        self._engine = engine

    def report(self, fraction: float, text: str) -> None:
        self._engine.analyze(CYCLE)


class ExplodingDetector:
    """Detector that always fails."""

    issue_type = IssueType.CIRCULAR_DEPENDENCY

    def detect(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        raise RuntimeError("detector exploded")


class TestAnalyze:
    """Tests for AnalysisEngine.analyze."""

    def test_cycle_found_and_confirmed(self) -> None:
        result = AnalysisEngine.with_defaults().analyze(CYCLE, "app")

        (issue,) = result.issues
        assert issue.type is IssueType.CIRCULAR_DEPENDENCY
        assert issue.validation_status is ValidationStatus.VALIDATED_TRUE_POSITIVE
        assert issue.confidence_score == 0.98
        assert result.project_name == "app"
        assert result.has_errors

    def test_clean_project(self) -> None:
        result = AnalysisEngine().analyze((make_service("A", "B"), make_service("B")))

        assert result.issues == ()
        assert result.project_name == DEFAULT_PROJECT_NAME
        assert result.metadata.components_analyzed == 2
        assert result.metadata.used_fallback_detection is False
        assert result.accuracy_metrics.precision == 1.0

    def test_progress_phases(self) -> None:
        progress = RecordingProgress()

        AnalysisEngine().analyze(CYCLE, progress=progress)

        assert progress.reports == [
            (0.1, "Building dependency graph"),
            (0.3, "Detecting issues"),
            (0.7, "Validating issues"),
            (0.9, "Estimating accuracy"),
            (1.0, "Analysis complete"),
        ]

    def test_cancel_between_phases(self) -> None:
        calls: list[int] = []

        def cancel_check() -> bool:
            calls.append(1)
            return len(calls) >= 2

        engine = AnalysisEngine()
        with pytest.raises(AnalysisCancelled) as exc_info:
            engine.analyze(CYCLE, cancel_check=cancel_check)

        assert exc_info.value.phase == "Detecting issues"
        assert engine.last_result is None
        assert engine.is_running is False

    def test_second_concurrent_analysis_rejected(self) -> None:
        engine = AnalysisEngine()

        with pytest.raises(AnalysisAlreadyRunningError):
            engine.analyze(CYCLE, progress=ReentrantProgress(engine))

        assert engine.is_running is False
        assert engine.analyze(CYCLE).issues

    def test_fallback_when_detector_raises(self) -> None:
        engine = AnalysisEngine(detectors=[ExplodingDetector()])

        result = engine.analyze(CYCLE)

        assert result.metadata.used_fallback_detection is True
        (issue,) = result.issues
        assert issue.component_name == FALLBACK_COMPONENT_NAME
        assert issue.validation_status is ValidationStatus.VALIDATED_FALSE_POSITIVE

    def test_validation_disabled(self) -> None:
        engine = AnalysisEngine(AnalysisConfig(validation_enabled=False))

        result = engine.analyze(CYCLE)

        assert [i.validation_status for i in result.issues] == [ValidationStatus.NOT_VALIDATED]
        assert result.accuracy_metrics.validation_enabled is False

    def test_graph_nodes_carry_issues(self) -> None:
        result = AnalysisEngine().analyze(CYCLE)

        node = result.graph.find_node("com.example.A")
        assert node is not None
        assert node.issues == result.issues

    def test_last_result(self) -> None:
        engine = AnalysisEngine()

        result = engine.analyze(CYCLE)

        assert engine.last_result is result

    def test_reused_engine_sees_providers_added_later(self) -> None:
        engine = AnalysisEngine.with_defaults()
        engine.analyze((make_service("A", "B"),))

        result = engine.analyze(CYCLE)

        assert [issue.type for issue in result.issues] == [IssueType.CIRCULAR_DEPENDENCY]

    def test_deterministic(self) -> None:
        components = (*CYCLE, make_service("C", "Missing"))

        first = AnalysisEngine().analyze(components).issues
        second = AnalysisEngine().analyze(components).issues

        assert first == second


class TestEngineState:
    """Tests for configuration, caches and the component-source entry point."""

    def test_from_config(self) -> None:
        config = AnalysisConfig(minimum_confidence_threshold=0.5)

        assert AnalysisEngine.from_config(config).config is config

    def test_summary_preview_length_from_config(self) -> None:
        engine = AnalysisEngine.from_config(AnalysisConfig(top_issue_count=1))
        components = (*CYCLE, make_service("C", "Missing"))

        result = engine.analyze(components)

        assert len(result.issues) == 2
        assert len(result.summary().top_issues) == 1

    def test_clear_caches(self) -> None:
        engine = AnalysisEngine()
        engine.analyze(CYCLE)
        assert len(engine.cache) > 0

        engine.clear_caches()

        assert len(engine.cache) == 0

    def test_run_rejects_non_di_project(self) -> None:
        source = StaticComponentSource("plain", [make_component("Plain")])

        with pytest.raises(NotDIProjectError, match="plain"):
            AnalysisEngine().run(source)

    def test_run_uses_source_name(self) -> None:
        result = AnalysisEngine().run(StaticComponentSource("shop", CYCLE))

        assert result.project_name == "shop"
        assert len(result.components) == 2


class TestAttachIssues:
    """Tests for attach_issues."""

    def test_no_issues_returns_same_graph(self) -> None:
        graph = make_graph(("a", "b"))

        assert attach_issues(graph, ()) is graph

    def test_issue_attached_to_each_affected_node(self) -> None:
        graph = make_graph(("a", "b"), ("b", "c"))
        issue = make_issue("a, b")

        attached = attach_issues(graph, [issue])

        assert [n.id for n in attached.nodes if n.issues] == ["a", "b"]
        assert attached.edges == graph.edges
