"""End-to-end properties of the analysis pipeline.

Components go in, an AnalysisResult comes out: graph building, detection,
deduplication, validation and accuracy estimation all run for real.
"""

import itertools
import time

import pytest

from injectcheck.application.graph.builder import GraphBuilder
from injectcheck.application.services.engine import AnalysisEngine
from injectcheck.domain.model.component import Component
from injectcheck.domain.model.enums import IssueType, Severity
from injectcheck.domain.model.issue import AmbiguousProviderDetails, Issue
from injectcheck.domain.model.metrics import AccuracyMetrics
from injectcheck.presentation.api.dsl import InjectCheck
from tests.factories import (
    make_component,
    make_dependency,
    make_provider,
    make_service,
    ring_components,
)


def _of_type(components: tuple[Component, ...], issue_type: IssueType) -> tuple[Issue, ...]:
    return InjectCheck(components).issues().of_type(issue_type).execute()


class TestCycles:
    """Cycle properties on graphs built from components."""

    def test_acyclic(self) -> None:
        components = [make_service("A", "B"), make_service("B", "C"), make_service("C")]

        graph = GraphBuilder().build(components)

        assert graph.has_cycles() is False
        assert graph.cycle_report().cycles == ()

    def test_two_cycle(self) -> None:
        graph = GraphBuilder().build([make_service("A", "B"), make_service("B", "A")])

        (cycle,) = graph.cycle_report().cycles

        assert graph.has_cycles() is True
        assert cycle.length == 2
        assert "A" in cycle.display_path()
        assert "B" in cycle.display_path()

    def test_self_loop(self) -> None:
        graph = GraphBuilder().build([make_service("A", "A")])

        (cycle,) = graph.cycle_report().cycles

        assert cycle.length == 1

    def test_fifty_ring_under_one_second(self) -> None:
        graph = GraphBuilder().build(ring_components(50))

        start = time.perf_counter()
        report = graph.cycle_report()
        elapsed = time.perf_counter() - start

        assert [c.length for c in report.cycles] == [50]
        assert elapsed < 1.0

    def test_fifty_ring_reported_as_warning(self) -> None:
        (issue,) = _of_type(ring_components(50), IssueType.CIRCULAR_DEPENDENCY)

        assert issue.severity is Severity.WARNING


class TestAmbiguity:
    """Ambiguous provider matrix."""

    @staticmethod
    def _module(*qualifiers: str | None) -> tuple[Component, ...]:
        providers = tuple(
            make_provider(f"provideApi{i}", "com.example.Api", qualifier)
            for i, qualifier in enumerate(qualifiers)
        )
        return (make_component("NetModule", providers=providers),)

    def test_two_unqualified(self) -> None:
        (issue,) = _of_type(self._module(None, None), IssueType.AMBIGUOUS_PROVIDER)

        assert isinstance(issue.details, AmbiguousProviderDetails)
        assert issue.details.is_named_conflict is False

    def test_qualified_and_unqualified(self) -> None:
        assert _of_type(self._module("a", None), IssueType.AMBIGUOUS_PROVIDER) == ()

    def test_distinct_qualifiers(self) -> None:
        assert _of_type(self._module("a", "b"), IssueType.AMBIGUOUS_PROVIDER) == ()

    def test_same_qualifier(self) -> None:
        (issue,) = _of_type(self._module("a", "a"), IssueType.AMBIGUOUS_PROVIDER)

        assert isinstance(issue.details, AmbiguousProviderDetails)
        assert issue.details.is_named_conflict is True


class TestUnresolved:
    """Adding a provider resolves a dependency."""

    SCREEN = make_component(
        "Screen", dependencies=(make_dependency("userService", "com.example.UserService"),)
    )

    def test_missing_provider(self) -> None:
        (issue,) = _of_type((self.SCREEN,), IssueType.UNRESOLVED_DEPENDENCY)

        assert issue.severity is Severity.ERROR

    def test_provider_added(self) -> None:
        module = make_component(
            "AppModule",
            providers=(make_provider("provideUserService", "com.example.UserService"),),
        )

        assert InjectCheck((self.SCREEN, module)).issues().is_empty()


class TestDeduplication:
    """Higher-priority findings claim their components."""

    @staticmethod
    def _with_duplicate_providers(class_name: str, *needs: str) -> Component:
        service = make_service(class_name, *needs)
        duplicates = (
            make_provider("provideMainApi", "com.example.Api"),
            make_provider("provideBackupApi", "com.example.Api"),
        )
        return make_component(
            class_name,
            dependencies=service.dependencies,
            providers=service.providers + duplicates,
        )

    def test_cycle_member_keeps_only_circular_issue(self) -> None:
        components = (self._with_duplicate_providers("A", "B"), make_service("B", "A"))

        issues = InjectCheck(components).issues().execute()

        assert [i.type for i in issues] == [IssueType.CIRCULAR_DEPENDENCY]

    def test_ambiguity_reported_outside_cycle(self) -> None:
        components = (self._with_duplicate_providers("A", "B"), make_service("B"))

        issues = InjectCheck(components).issues().execute()

        assert [i.type for i in issues] == [IssueType.AMBIGUOUS_PROVIDER]

    def test_ambiguity_shared_with_cycle_member_reported(self) -> None:
        cycle_member = make_component(
            "A",
            dependencies=(make_dependency("b", "com.example.B"),),
            providers=(
                make_provider("provideA", "com.example.A"),
                make_provider("provideApi", "com.example.Api"),
            ),
        )
        outsider = make_component(
            "NetModule", providers=(make_provider("provideApi", "com.example.Api"),)
        )
        components = (cycle_member, make_service("B", "A"), outsider)

        issues = InjectCheck(components).issues().execute()

        circular = [i for i in issues if i.type is IssueType.CIRCULAR_DEPENDENCY]
        (ambiguity,) = [i for i in issues if i.type is IssueType.AMBIGUOUS_PROVIDER]
        assert len(circular) == 1
        assert isinstance(ambiguity.details, AmbiguousProviderDetails)
        assert ambiguity.details.provider_components == (
            "com.example.A",
            "com.example.NetModule",
        )


class TestBounds:
    """Confidence and metric bounds."""

    def test_confidence_within_bounds(self) -> None:
        components = (
            *ring_components(3),
            make_service("A", "A"),
            make_service("B", "Missing"),
            *TestAmbiguity._module(None, None),
        )

        result = AnalysisEngine().analyze(components)

        assert result.issues
        assert all(0.0 <= i.confidence_score <= 1.0 for i in result.issues)

    @pytest.mark.parametrize(
        ("tp", "fp", "fn"), list(itertools.product(range(4), repeat=3))
    )
    def test_metrics_within_bounds(self, tp: int, fp: int, fn: int) -> None:
        metrics = AccuracyMetrics(
            total_validated_issues=tp + fp,
            true_positives=tp,
            false_positives=fp,
            false_negatives=fn,
        )

        for value in (metrics.precision, metrics.recall, metrics.f1_score):
            assert 0.0 <= value <= 1.0


class TestDeterminism:
    """Same input, same output."""

    def test_repeated_runs_identical(self) -> None:
        components = (
            *ring_components(4),
            make_service("A", "B"),
            make_service("B", "A"),
            make_service("C", "Missing"),
            *TestAmbiguity._module("a", "a"),
        )

        first = AnalysisEngine().analyze(components).issues
        second = AnalysisEngine().analyze(components).issues

        assert first == second
        assert [i.type for i in first] == [i.type for i in second]
