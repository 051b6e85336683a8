"""Detector registry.

Order is priority order: each detector's findings exclude their components
from the detectors after it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from injectcheck.application.detectors._base import BaseDetector
from injectcheck.application.detectors.ambiguous import AmbiguousProviderDetector
from injectcheck.application.detectors.circular import CircularDependencyDetector
from injectcheck.application.detectors.qualifier import NamedQualifierMismatchDetector
from injectcheck.application.detectors.singleton import SingletonViolationDetector
from injectcheck.application.detectors.unresolved import UnresolvedDependencyDetector
from injectcheck.domain.model.configuration import AnalysisConfig
from injectcheck.domain.ports.detector import DetectorProtocol

if TYPE_CHECKING:
    from injectcheck.domain.ports.type_oracle import SupertypeOracle


# Registry - tuple for immutability
_ALL_DETECTORS: tuple[type[BaseDetector], ...] = (
    CircularDependencyDetector,
    UnresolvedDependencyDetector,
    AmbiguousProviderDetector,
    SingletonViolationDetector,
    NamedQualifierMismatchDetector,
)


def default_detectors() -> tuple[DetectorProtocol, ...]:
    """All detectors with the default configuration."""
    return detectors_from_config(AnalysisConfig())


def detectors_from_config(
    config: AnalysisConfig,
    oracle: SupertypeOracle | None = None,
) -> tuple[DetectorProtocol, ...]:
    """Instantiate detectors in priority order.

    If from_config() returns None, the detector is disabled.

    Args:
        config: Analysis configuration
        oracle: Optional type-system oracle for inheritance matches

    Returns:
        Tuple of enabled detectors
    """
    detectors: list[DetectorProtocol] = []

    for detector_cls in _ALL_DETECTORS:
        detector = detector_cls.from_config(config, oracle)
        if detector is not None:
            detectors.append(detector)

    return tuple(detectors)
