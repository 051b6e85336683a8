"""Provider validity rules shared by detectors.

Malformed records are "not data": they are dropped here, never raised on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from injectcheck.domain.model.configuration import DEFAULT_SUSPICIOUS_PROVIDER_NAMES

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from injectcheck.domain.model.component import Component, Provider
    from injectcheck.domain.model.configuration import AnalysisConfig

logger = logging.getLogger(__name__)


def is_blank(value: str | None) -> bool:
    """None, empty or whitespace only."""
    return value is None or not value.strip()


def is_excluded(component: Component, excluded: frozenset[str]) -> bool:
    """Component is named in the exclusion set (simple or fully qualified)."""
    if not excluded:
        return False
    return component.fully_qualified_name in excluded or component.class_name in excluded


def all_excluded(owners: Iterable[Component], excluded: frozenset[str]) -> bool:
    """Every owner of a finding is already claimed by a higher-priority one.

    Provider groups span components, so one excluded owner is not enough
    to drop a finding.
    """
    if not excluded:
        return False
    return all(is_excluded(owner, excluded) for owner in owners)


def is_well_formed(provider: Provider) -> bool:
    """Structural validity of a provider record.

    Rejects blank method name or return type, blank provides_type,
    named providers without a qualifier string and providers claiming
    more than one multibinding collection.
    """
    if is_blank(provider.method_name) or is_blank(provider.return_type):
        return False
    if provider.provides_type is not None and is_blank(provider.provides_type):
        return False
    if provider.is_named and is_blank(provider.named_qualifier):
        return False
    return provider.collection_flag_count <= 1


@dataclass(frozen=True, slots=True)
class ProviderPolicy:
    """Heuristic filters for providers that should not count.

    Attributes:
        suspicious_names: Method-name fragments marking inactive providers
            (case-insensitive substring match)
        ignored_components: Component names (simple or fully qualified)
            whose providers are ignored
    """

    suspicious_names: tuple[str, ...] = DEFAULT_SUSPICIOUS_PROVIDER_NAMES
    ignored_components: frozenset[str] = frozenset()

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> Self:
        """Policy from analysis configuration."""
        return cls(
            suspicious_names=config.suspicious_provider_names,
            ignored_components=config.ignored_component_names,
        )

    def is_suspicious(self, provider: Provider) -> bool:
        """Method name contains a denylisted fragment."""
        name = provider.method_name.lower()
        return any(fragment.lower() in name for fragment in self.suspicious_names)

    def is_ignored(self, component: Component) -> bool:
        """Component is on the ignore list."""
        return (
            component.class_name in self.ignored_components
            or component.fully_qualified_name in self.ignored_components
        )

    def is_active(self, component: Component, provider: Provider) -> bool:
        """Provider takes part in resolution."""
        if self.is_ignored(component) or not is_well_formed(provider):
            return False
        if self.is_suspicious(provider):
            logger.debug("Skipping suspicious provider %s", component.provider_path(provider))
            return False
        return True

    def active_providers(
        self,
        components: Sequence[Component],
    ) -> Iterator[tuple[Component, Provider]]:
        """Active (component, provider) pairs in input order."""
        for component in components:
            for provider in component.providers:
                if self.is_active(component, provider):
                    yield component, provider
