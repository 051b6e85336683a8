"""Application services: pipeline stages and the engine facade."""

from injectcheck.application.services.accuracy import AccuracyEstimator
from injectcheck.application.services.basic_detection import basic_issue_detection
from injectcheck.application.services.deduplicator import (
    ISSUE_PRIORITY,
    ExclusionSet,
    deduplicate,
    detect_with_exclusions,
)
from injectcheck.application.services.engine import AnalysisEngine
from injectcheck.application.services.validator import IssueValidator, filter_by_confidence

__all__ = [
    "AccuracyEstimator",
    "AnalysisEngine",
    "ExclusionSet",
    "ISSUE_PRIORITY",
    "IssueValidator",
    "basic_issue_detection",
    "deduplicate",
    "detect_with_exclusions",
    "filter_by_confidence",
]
