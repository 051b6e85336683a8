"""Base detector class.

Provides default implementation of DetectorProtocol.
Concrete detectors inherit from this.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Self

from injectcheck.application.detectors.providers import ProviderPolicy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.configuration import AnalysisConfig
    from injectcheck.domain.model.enums import IssueType
    from injectcheck.domain.model.graph import DependencyGraph
    from injectcheck.domain.model.issue import Issue
    from injectcheck.domain.ports.type_oracle import SupertypeOracle


class BaseDetector(ABC):
    """Base class for detectors implementing DetectorProtocol.

    Concrete detectors must:
    1. Set `issue_type` class attribute
    2. Implement `detect()` method
    3. Optionally override `from_config()` for conditional activation
    """

    issue_type: IssueType
    """Issue type this detector reports."""

    def __init__(self, policy: ProviderPolicy | None = None) -> None:
        """Initialize detector.

        Args:
            policy: Provider validity policy. Defaults if None.
        """
        self._policy = policy or ProviderPolicy()

    @property
    def policy(self) -> ProviderPolicy:
        """Provider validity policy in use."""
        return self._policy

    @abstractmethod
    def detect(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """Detect issues.

        Args:
            components: Components to analyse
            graph: Dependency graph of the components
            excluded: Component names already claimed by a higher-priority detector

        Returns:
            Tuple of issues found (empty if none)
        """

    @classmethod
    def from_config(
        cls,
        config: AnalysisConfig,
        oracle: SupertypeOracle | None = None,
    ) -> Self | None:
        """Create detector from config.

        Default: always enabled with the config's provider policy.

        Args:
            config: Analysis configuration
            oracle: Optional type-system oracle

        Returns:
            Detector instance if enabled, None if disabled
        """
        return cls(ProviderPolicy.from_config(config))

