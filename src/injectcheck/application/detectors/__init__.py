"""DI issue detectors.

Detectors inspect components and the dependency graph:
- CircularDependencyDetector: cycles and strongly connected clusters
- UnresolvedDependencyDetector: dependencies without providers
- AmbiguousProviderDetector: competing providers for one type
- SingletonViolationDetector: scope conflicts
- NamedQualifierMismatchDetector: unknown qualifiers
"""

from injectcheck.application.detectors._base import BaseDetector
from injectcheck.application.detectors._registry import (
    default_detectors,
    detectors_from_config,
)
from injectcheck.application.detectors.ambiguous import AmbiguousProviderDetector
from injectcheck.application.detectors.circular import CircularDependencyDetector
from injectcheck.application.detectors.providers import ProviderPolicy
from injectcheck.application.detectors.qualifier import NamedQualifierMismatchDetector
from injectcheck.application.detectors.singleton import SingletonViolationDetector
from injectcheck.application.detectors.unresolved import UnresolvedDependencyDetector

__all__ = [
    # Base
    "BaseDetector",
    "ProviderPolicy",
    # Detectors
    "AmbiguousProviderDetector",
    "CircularDependencyDetector",
    "NamedQualifierMismatchDetector",
    "SingletonViolationDetector",
    "UnresolvedDependencyDetector",
    # Factory functions
    "default_detectors",
    "detectors_from_config",
]
