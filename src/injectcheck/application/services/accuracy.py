"""Accuracy estimation from validated issues.

Expected issue counts are a volume heuristic, not ground truth: recall and
statistical error are estimates.
"""

from __future__ import annotations

from collections.abc import Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeVar

from injectcheck.domain.model.enums import AccuracyTrend, ValidationStatus
from injectcheck.domain.model.metrics import (
    AccuracyMetrics,
    AccuracyTrendReport,
    ValidationDetails,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.enums import IssueType
    from injectcheck.domain.model.issue import Issue

TREND_THRESHOLD = 0.05

# (minimum component count, rate) - first match wins
_DEPENDENCY_RATES: tuple[tuple[int, float], ...] = ((101, 0.03), (51, 0.02), (0, 0.01))
_COMPLEXITY_BONUS: tuple[tuple[int, int], ...] = ((101, 3), (51, 2), (21, 1), (0, 0))
PROVIDER_RATE = 0.02

# (minimum accuracy %, maximum false-positive rate %, verdict)
_VERDICTS: tuple[tuple[float, float, str], ...] = (
    (95.0, 5.0, "EXCELLENT - Statistical accuracy target achieved"),
    (80.0, 10.0, "GOOD - Minor accuracy improvements needed"),
    (60.0, 100.0, "WARNING - Accuracy below target, review detection rules"),
)
_POOR_VERDICT = "POOR - Significant accuracy issues, detection needs rework"


T = TypeVar("T")


def _step(table: Sequence[tuple[int, T]], count: int) -> T:
    for minimum, value in table:
        if count >= minimum:
            return value
    return table[-1][1]


def verdict_for(accuracy_percent: float, false_positive_rate: float) -> str:
    """Qualitative verdict banded at 95/80/60 percent."""
    for minimum, max_fp_rate, verdict in _VERDICTS:
        if accuracy_percent >= minimum and false_positive_rate < max_fp_rate:
            return verdict
    return _POOR_VERDICT


class AccuracyEstimator:
    """Aggregates validated issues into precision/recall/F1."""

    def estimate_expected_issues(self, components: Sequence[Component]) -> int:
        """Heuristic expected issue count from component volume.

        deps * rate(n) + providers * 0.02 + bonus(n), each term truncated.
        """
        count = len(components)
        dependencies = sum(len(c.dependencies) for c in components)
        providers = sum(len(c.providers) for c in components)
        rate = _step(_DEPENDENCY_RATES, count)
        return (
            int(dependencies * rate)
            + int(providers * PROVIDER_RATE)
            + _step(_COMPLEXITY_BONUS, count)
        )

    def per_type_details(self, issues: Sequence[Issue]) -> Mapping[IssueType, ValidationDetails]:
        """ValidationDetails per issue type, first-appearance order."""
        grouped: dict[IssueType, list[Issue]] = {}
        for issue in issues:
            grouped.setdefault(issue.type, []).append(issue)

        details: dict[IssueType, ValidationDetails] = {}
        for issue_type, group in grouped.items():
            details[issue_type] = ValidationDetails(
                total_detected=len(group),
                validated=sum(1 for i in group if i.is_validated),
                false_positives=sum(
                    1
                    for i in group
                    if i.validation_status is ValidationStatus.VALIDATED_FALSE_POSITIVE
                ),
                average_confidence=sum(i.confidence_score for i in group) / len(group),
            )
        return MappingProxyType(details)

    def calculate_metrics(
        self,
        issues: Sequence[Issue],
        components: Sequence[Component],
        *,
        validation_enabled: bool = True,
    ) -> AccuracyMetrics:
        """Metrics for one run.

        Args:
            issues: Validated (and filtered) issues
            components: Components analysed, for the expected-count heuristic
            validation_enabled: Whether the validator ran

        Returns:
            AccuracyMetrics
        """
        validated = [i for i in issues if i.is_validated]
        true_positives = sum(
            1 for i in validated if i.validation_status is ValidationStatus.VALIDATED_TRUE_POSITIVE
        )
        false_positives = len(validated) - true_positives
        expected = self.estimate_expected_issues(components)

        if validated:
            average = sum(i.confidence_score for i in validated) / len(validated)
        else:
            average = 1.0

        return AccuracyMetrics(
            total_validated_issues=len(validated),
            true_positives=true_positives,
            false_positives=false_positives,
            false_negatives=max(0, expected - true_positives),
            expected_issues=expected,
            validation_enabled=validation_enabled,
            average_confidence_score=min(1.0, max(0.0, average)),
            per_type_details=self.per_type_details(issues),
        )

    def generate_report(self, metrics: AccuracyMetrics, total_issues: int) -> str:
        """Plain-text accuracy report with a qualitative verdict."""
        if metrics.total_validated_issues:
            accuracy = metrics.true_positives / metrics.total_validated_issues * 100
        else:
            accuracy = 100.0
        fp_rate = metrics.false_positives / total_issues * 100 if total_issues else 0.0
        if metrics.expected_issues:
            error = abs(total_issues - metrics.expected_issues) / metrics.expected_issues * 100
        else:
            error = 0.0

        lines = [
            "=== Statistical Accuracy Report ===",
            f"Total Issues: {total_issues}",
            f"Validated Issues: {metrics.total_validated_issues}",
            f"True Positives: {metrics.true_positives}",
            f"False Positives: {metrics.false_positives}",
            f"Expected Issues: {metrics.expected_issues}",
            "",
            f"Precision: {metrics.precision * 100:.1f}%",
            f"Recall: {metrics.recall * 100:.1f}%",
            f"F1-Score: {metrics.f1_score * 100:.1f}%",
            f"False Positive Rate: {fp_rate:.1f}%",
            f"Statistical Error: {error:.1f}%",
            f"Average Confidence: {metrics.average_confidence_score * 100:.1f}%",
        ]

        if metrics.per_type_details:
            lines.extend(["", "🔍 Validation Details by Issue Type:"])
            for issue_type, details in metrics.per_type_details.items():
                lines.extend(
                    [
                        f"  {issue_type.name}:",
                        f"    Detected: {details.total_detected}",
                        f"    False Positives: {details.false_positives}",
                        f"    Accuracy: {details.accuracy * 100:.1f}%",
                    ]
                )

        lines.extend(["", f"Verdict: {verdict_for(accuracy, fp_rate)}"])
        return "\n".join(lines)

    def compare(
        self,
        current: AccuracyMetrics,
        previous: AccuracyMetrics | None,
    ) -> AccuracyTrendReport:
        """Trend between two runs, by F1 change beyond +-0.05."""
        if previous is None:
            return AccuracyTrendReport(current, None, 0.0, 0.0, 0.0, AccuracyTrend.NO_DATA)

        f1_change = current.f1_score - previous.f1_score
        if f1_change > TREND_THRESHOLD:
            trend = AccuracyTrend.IMPROVING
        elif f1_change < -TREND_THRESHOLD:
            trend = AccuracyTrend.DECLINING
        else:
            trend = AccuracyTrend.STABLE

        return AccuracyTrendReport(
            current=current,
            previous=previous,
            precision_change=current.precision - previous.precision,
            recall_change=current.recall - previous.recall,
            f1_change=f1_change,
            trend=trend,
        )
