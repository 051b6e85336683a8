"""Detector protocol for DI issue detectors.

Users extend injectcheck by implementing this Protocol.
Detectors are stateless: same input, same issues.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Self

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.configuration import AnalysisConfig
    from injectcheck.domain.model.enums import IssueType
    from injectcheck.domain.model.graph import DependencyGraph
    from injectcheck.domain.model.issue import Issue
    from injectcheck.domain.ports.type_oracle import SupertypeOracle


class DetectorProtocol(Protocol):
    """Contract for issue detectors.

    Key pattern: from_config() returns None if the detector is disabled.

    Example:
        class MissingAnnotationDetector:
            issue_type = IssueType.MISSING_COMPONENT_ANNOTATION

            def detect(
                self,
                components: Sequence[Component],
                graph: DependencyGraph,
                excluded: frozenset[str] = frozenset(),
            ) -> tuple[Issue, ...]:
                return ()

            @classmethod
            def from_config(
                cls,
                config: AnalysisConfig,
                oracle: SupertypeOracle | None = None,
            ) -> Self | None:
                return cls()
    """

    issue_type: IssueType
    """Issue type this detector reports."""

    def detect(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """Detect issues.

        Args:
            components: Components to analyse
            graph: Dependency graph built from the components
            excluded: Component names already claimed by a higher-priority detector

        Returns:
            Tuple of issues (empty if none)
        """
        ...

    @classmethod
    def from_config(
        cls,
        config: AnalysisConfig,
        oracle: SupertypeOracle | None = None,
    ) -> Self | None:
        """Create detector from config. None = disabled."""
        ...
