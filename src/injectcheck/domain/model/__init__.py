"""Domain model: immutable value objects of one analysis run."""

from injectcheck.domain.model.component import Component, Dependency, Provider
from injectcheck.domain.model.configuration import AnalysisConfig
from injectcheck.domain.model.cycle import Cycle, CycleReport
from injectcheck.domain.model.enums import (
    AccuracyTrend,
    ComponentKind,
    EdgeKind,
    IssueType,
    NodeKind,
    Severity,
    ValidationStatus,
)
from injectcheck.domain.model.graph import DependencyGraph, GraphEdge, GraphNode
from injectcheck.domain.model.issue import (
    AmbiguousProviderDetails,
    CircularDependencyDetails,
    Issue,
    LifecycleMismatchDetails,
    QualifierMismatchDetails,
    SingletonConflictDetails,
    UnresolvedDependencyDetails,
)
from injectcheck.domain.model.metrics import (
    AccuracyMetrics,
    AccuracyTrendReport,
    ValidationDetails,
)
from injectcheck.domain.model.result import AnalysisMetadata, AnalysisResult, AnalysisSummary

__all__ = [
    # Components
    "Component",
    "ComponentKind",
    "Dependency",
    "Provider",
    # Graph
    "Cycle",
    "CycleReport",
    "DependencyGraph",
    "EdgeKind",
    "GraphEdge",
    "GraphNode",
    "NodeKind",
    # Issues
    "AmbiguousProviderDetails",
    "CircularDependencyDetails",
    "Issue",
    "IssueType",
    "LifecycleMismatchDetails",
    "QualifierMismatchDetails",
    "Severity",
    "SingletonConflictDetails",
    "UnresolvedDependencyDetails",
    "ValidationStatus",
    # Metrics and results
    "AccuracyMetrics",
    "AccuracyTrend",
    "AccuracyTrendReport",
    "AnalysisConfig",
    "AnalysisMetadata",
    "AnalysisResult",
    "AnalysisSummary",
    "ValidationDetails",
]
