"""Tests for domain/model/configuration.py."""

import pytest

from injectcheck.domain.model.configuration import (
    DEFAULT_SUSPICIOUS_PROVIDER_NAMES,
    AnalysisConfig,
)


class TestAnalysisConfig:
    """Tests for AnalysisConfig defaults and FAIL-FIRST validation."""

    def test_defaults(self) -> None:
        config = AnalysisConfig()

        assert config.validation_enabled is True
        assert config.minimum_confidence_threshold == 0.3
        assert config.suspicious_provider_names == DEFAULT_SUSPICIOUS_PROVIDER_NAMES
        assert config.ignored_component_names == frozenset()
        assert config.strict_singleton_conflicts is True
        assert config.top_issue_count == 5

    @pytest.mark.parametrize("threshold", [-0.01, 1.01])
    def test_threshold_out_of_range_raises(self, threshold: float) -> None:
        with pytest.raises(ValueError, match="minimum_confidence_threshold"):
            AnalysisConfig(minimum_confidence_threshold=threshold)

    @pytest.mark.parametrize("threshold", [0.0, 1.0])
    def test_threshold_bounds_accepted(self, threshold: float) -> None:
        config = AnalysisConfig(minimum_confidence_threshold=threshold)

        assert config.minimum_confidence_threshold == threshold

    def test_top_issue_count_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="top_issue_count"):
            AnalysisConfig(top_issue_count=0)

    def test_empty_suspicious_name_raises(self) -> None:
        with pytest.raises(ValueError, match="empty strings"):
            AnalysisConfig(suspicious_provider_names=("temp", ""))

    def test_immutable(self) -> None:
        config = AnalysisConfig()

        with pytest.raises(AttributeError):
            config.validation_enabled = False  # type: ignore[misc]
