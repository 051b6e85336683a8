"""Tests for application/detectors/_registry.py."""

from injectcheck.application.detectors import (
    AmbiguousProviderDetector,
    CircularDependencyDetector,
    NamedQualifierMismatchDetector,
    SingletonViolationDetector,
    UnresolvedDependencyDetector,
    default_detectors,
    detectors_from_config,
)
from injectcheck.domain.model.configuration import AnalysisConfig
from injectcheck.domain.model.enums import IssueType


class TestRegistry:
    """Tests for detector instantiation."""

    def test_default_order_is_priority_order(self) -> None:
        detectors = default_detectors()

        assert [type(d) for d in detectors] == [
            CircularDependencyDetector,
            UnresolvedDependencyDetector,
            AmbiguousProviderDetector,
            SingletonViolationDetector,
            NamedQualifierMismatchDetector,
        ]

    def test_issue_types(self) -> None:
        types = [d.issue_type for d in default_detectors()]

        assert types == [
            IssueType.CIRCULAR_DEPENDENCY,
            IssueType.UNRESOLVED_DEPENDENCY,
            IssueType.AMBIGUOUS_PROVIDER,
            IssueType.SINGLETON_VIOLATION,
            IssueType.NAMED_QUALIFIER_MISMATCH,
        ]

    def test_policy_from_config(self) -> None:
        config = AnalysisConfig(suspicious_provider_names=("mock",))

        detectors = detectors_from_config(config)

        for detector in detectors:
            assert detector.policy.suspicious_names == ("mock",)  # type: ignore[attr-defined]
