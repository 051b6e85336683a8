"""Tests for application/services/accuracy.py."""

import pytest

from injectcheck.application.services.accuracy import AccuracyEstimator, verdict_for
from injectcheck.domain.model.component import Component
from injectcheck.domain.model.enums import AccuracyTrend, IssueType, ValidationStatus
from injectcheck.domain.model.metrics import AccuracyMetrics
from tests.factories import make_component, make_dependency, make_issue, make_provider

TP = ValidationStatus.VALIDATED_TRUE_POSITIVE
FP = ValidationStatus.VALIDATED_FALSE_POSITIVE


def _components(count: int, dependencies: int = 1, providers: int = 1) -> tuple[Component, ...]:
    return tuple(
        make_component(
            f"C{i}",
            dependencies=tuple(make_dependency(f"dep{d}", f"T{d}") for d in range(dependencies)),
            providers=tuple(make_provider(f"provide{p}", f"P{p}") for p in range(providers)),
        )
        for i in range(count)
    )


class TestEstimateExpectedIssues:
    """Tests for the volume heuristic."""

    def test_small_project(self) -> None:
        assert AccuracyEstimator().estimate_expected_issues(_components(10)) == 0

    def test_complexity_bonus_only(self) -> None:
        components = _components(25, dependencies=0, providers=0)

        assert AccuracyEstimator().estimate_expected_issues(components) == 1

    def test_medium_project(self) -> None:
        """120 deps * 0.02 + 60 providers * 0.02 + bonus 2."""
        components = _components(60, dependencies=2)

        assert AccuracyEstimator().estimate_expected_issues(components) == 5

    def test_large_project(self) -> None:
        """150 deps * 0.03 truncated + bonus 3."""
        components = _components(150, providers=0)

        assert AccuracyEstimator().estimate_expected_issues(components) == 7

    def test_empty(self) -> None:
        assert AccuracyEstimator().estimate_expected_issues(()) == 0


class TestCalculateMetrics:
    """Tests for calculate_metrics."""

    def test_counts_only_validated_issues(self) -> None:
        issues = [
            make_issue("a").with_validation(TP, 0.9),
            make_issue("b").with_validation(FP, 0.2),
            make_issue("c"),
            make_issue("d").with_validation(ValidationStatus.VALIDATION_FAILED, 0.5),
        ]

        metrics = AccuracyEstimator().calculate_metrics(issues, ())

        assert metrics.total_validated_issues == 2
        assert metrics.true_positives == 1
        assert metrics.false_positives == 1
        assert metrics.false_negatives == 0
        assert metrics.average_confidence_score == pytest.approx(0.55)

    def test_per_type_details(self) -> None:
        issues = [
            make_issue("a").with_validation(TP, 0.9),
            make_issue("b").with_validation(FP, 0.2),
            make_issue("c", IssueType.CIRCULAR_DEPENDENCY).with_validation(TP, 0.98),
        ]

        details = AccuracyEstimator().calculate_metrics(issues, ()).per_type_details

        assert list(details) == [IssueType.UNRESOLVED_DEPENDENCY, IssueType.CIRCULAR_DEPENDENCY]
        unresolved = details[IssueType.UNRESOLVED_DEPENDENCY]
        assert (unresolved.total_detected, unresolved.false_positives) == (2, 1)
        assert unresolved.accuracy == 0.5
        assert unresolved.average_confidence == pytest.approx(0.55)

    def test_false_negatives_from_expected(self) -> None:
        issues = [make_issue("a").with_validation(TP, 0.9)]

        metrics = AccuracyEstimator().calculate_metrics(issues, _components(60, dependencies=2))

        assert metrics.expected_issues == 5
        assert metrics.false_negatives == 4
        assert metrics.recall == pytest.approx(0.2)

    def test_no_issues(self) -> None:
        metrics = AccuracyEstimator().calculate_metrics((), ())

        assert metrics.precision == 1.0
        assert metrics.average_confidence_score == 1.0
        assert not metrics.per_type_details

    def test_validation_flag_carried(self) -> None:
        metrics = AccuracyEstimator().calculate_metrics((), (), validation_enabled=False)

        assert metrics.validation_enabled is False


class TestGenerateReport:
    """Tests for the plain-text accuracy report."""

    def test_report_lines(self) -> None:
        issues = [
            make_issue("a").with_validation(TP, 0.9),
            make_issue("b").with_validation(FP, 0.2),
        ]
        estimator = AccuracyEstimator()
        metrics = estimator.calculate_metrics(issues, ())

        lines = estimator.generate_report(metrics, total_issues=2).splitlines()

        assert lines[0] == "=== Statistical Accuracy Report ==="
        assert "Precision: 50.0%" in lines
        assert "Recall: 100.0%" in lines
        assert "False Positive Rate: 50.0%" in lines
        assert "🔍 Validation Details by Issue Type:" in lines
        assert "  UNRESOLVED_DEPENDENCY:" in lines
        assert lines[-1].startswith("Verdict: POOR")

    def test_clean_report(self) -> None:
        report = AccuracyEstimator().generate_report(AccuracyMetrics(), total_issues=0)

        assert "Statistical Error: 0.0%" in report
        assert "Validation Details" not in report
        assert report.splitlines()[-1].startswith("Verdict: EXCELLENT")


class TestVerdict:
    """Tests for verdict_for bands."""

    @pytest.mark.parametrize(
        ("accuracy", "fp_rate", "expected"),
        [
            (96.0, 4.0, "EXCELLENT"),
            (96.0, 6.0, "GOOD"),
            (85.0, 9.9, "GOOD"),
            (85.0, 20.0, "WARNING"),
            (60.0, 50.0, "WARNING"),
            (59.9, 0.0, "POOR"),
        ],
    )
    def test_bands(self, accuracy: float, fp_rate: float, expected: str) -> None:
        assert verdict_for(accuracy, fp_rate).startswith(expected)


class TestCompare:
    """Tests for run-to-run comparison."""

    PERFECT = AccuracyMetrics(total_validated_issues=1, true_positives=1)
    HALF = AccuracyMetrics(total_validated_issues=2, true_positives=1, false_positives=1)

    def test_no_previous(self) -> None:
        report = AccuracyEstimator().compare(self.PERFECT, None)

        assert report.trend is AccuracyTrend.NO_DATA
        assert report.f1_change == 0.0

    def test_improving(self) -> None:
        report = AccuracyEstimator().compare(self.PERFECT, self.HALF)

        assert report.trend is AccuracyTrend.IMPROVING
        assert report.precision_change == pytest.approx(0.5)

    def test_declining(self) -> None:
        assert AccuracyEstimator().compare(self.HALF, self.PERFECT).trend is AccuracyTrend.DECLINING

    def test_stable(self) -> None:
        assert AccuracyEstimator().compare(self.HALF, self.HALF).trend is AccuracyTrend.STABLE
