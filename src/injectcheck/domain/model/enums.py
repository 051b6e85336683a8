"""Domain enumerations.

IssueType and Severity form the stable issue taxonomy. Adding an IssueType
requires a rank in the deduplicator priority table and a validator rule.
"""

from enum import Enum, auto


class ComponentKind(Enum):
    """Role of a component in the DI graph."""

    COMPONENT = auto()
    PROVIDER = auto()  # only provides
    CONSUMER = auto()  # only consumes
    COMPOSITE = auto()  # provides and consumes


class NodeKind(Enum):
    """Graph node kind."""

    COMPONENT = auto()
    PROVIDER = auto()  # synthetic provider-method node


class EdgeKind(Enum):
    """Graph edge kind."""

    PROVIDES = auto()
    DEPENDENCY = auto()
    SINGLETON = auto()
    FACTORY = auto()
    NAMED = auto()


class IssueType(Enum):
    """Closed set of issue types."""

    CIRCULAR_DEPENDENCY = auto()
    AMBIGUOUS_PROVIDER = auto()
    UNRESOLVED_DEPENDENCY = auto()
    SINGLETON_VIOLATION = auto()
    NAMED_QUALIFIER_MISMATCH = auto()
    MISSING_COMPONENT_ANNOTATION = auto()


class Severity(Enum):
    """Issue severity."""

    ERROR = auto()  # must be fixed
    WARNING = auto()  # likely problem
    INFO = auto()  # informational

    @property
    def rank(self) -> int:
        """Sort key: ERROR first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


class ValidationStatus(Enum):
    """Outcome of re-validating an issue."""

    NOT_VALIDATED = auto()
    VALIDATED_TRUE_POSITIVE = auto()
    VALIDATED_FALSE_POSITIVE = auto()
    VALIDATION_FAILED = auto()


class AccuracyTrend(Enum):
    """Direction of accuracy change between two runs."""

    IMPROVING = auto()
    STABLE = auto()
    DECLINING = auto()
    NO_DATA = auto()
