"""Singleton violation detector.

Two independent checks:
- conflicting providers for one singleton key (type + qualifier)
- singleton-scoped consumers fed by non-singleton providers
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from injectcheck.application.detectors._base import BaseDetector
from injectcheck.application.detectors.providers import (
    ProviderPolicy,
    all_excluded,
    is_blank,
    is_excluded,
)
from injectcheck.domain.model.enums import IssueType, Severity
from injectcheck.domain.model.issue import (
    Issue,
    LifecycleMismatchDetails,
    SingletonConflictDetails,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component, Dependency, Provider
    from injectcheck.domain.model.configuration import AnalysisConfig
    from injectcheck.domain.model.graph import DependencyGraph
    from injectcheck.domain.ports.type_oracle import SupertypeOracle

CONFLICT_FIX = "Remove duplicate singleton providers or use different types/qualifiers"


def describe_key(type_name: str, qualifier: str | None) -> str:
    """Type plus qualifier for messages."""
    return type_name if qualifier is None else f"{type_name} (@Named({qualifier}))"


class SingletonViolationDetector(BaseDetector):
    """Scope consistency checks.

    Attributes:
        _strict: Also flag keys with several providers of which fewer than
            two are singletons.
    """

    issue_type = IssueType.SINGLETON_VIOLATION

    def __init__(self, policy: ProviderPolicy | None = None, *, strict: bool = True) -> None:
        """Initialize detector.

        Args:
            policy: Provider validity policy
            strict: Enable the broader duplicate-provider rule
        """
        super().__init__(policy)
        self._strict = strict

    @classmethod
    def from_config(
        cls,
        config: AnalysisConfig,
        oracle: SupertypeOracle | None = None,
    ) -> Self:
        """Always enabled; strictness from config."""
        return cls(ProviderPolicy.from_config(config), strict=config.strict_singleton_conflicts)

    def detect(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """Conflict issues first, then lifecycle mismatches."""
        return self.detect_conflicts(components, excluded) + self.detect_lifecycle_mismatches(
            components, excluded
        )

    def detect_conflicts(
        self,
        components: Sequence[Component],
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """ERROR per (type, qualifier) key with duplicate providers.

        Keys whose providers all belong to excluded components are skipped.
        """
        groups: dict[tuple[str, str | None], dict[str, tuple[Component, Provider]]] = {}
        for component, provider in self.policy.active_providers(components):
            if provider.is_collection:
                continue
            key = (provider.effective_type, provider.qualifier)
            groups.setdefault(key, {}).setdefault(
                component.provider_path(provider), (component, provider)
            )

        issues: list[Issue] = []
        for (type_name, qualifier), entries in groups.items():
            singleton_count = sum(1 for _, p in entries.values() if p.is_singleton)
            if all_excluded((c for c, _ in entries.values()), excluded):
                continue
            if singleton_count > 1 or (self._strict and len(entries) > 1):
                issues.append(self._conflict_issue(type_name, qualifier, entries, singleton_count))
        return tuple(issues)

    def _conflict_issue(
        self,
        type_name: str,
        qualifier: str | None,
        entries: dict[str, tuple[Component, Provider]],
        singleton_count: int,
    ) -> Issue:
        paths = tuple(entries)
        owners = tuple(dict.fromkeys(c.fully_qualified_name for c, _ in entries.values()))
        described = describe_key(type_name, qualifier)
        if singleton_count > 1:
            message = f"Multiple singleton providers found for type: {described}"
        else:
            message = f"Multiple providers found for singleton key: {described}"

        return Issue(
            type=self.issue_type,
            severity=Severity.ERROR,
            message=message,
            component_name=", ".join(paths),
            suggested_fix=CONFLICT_FIX,
            details=SingletonConflictDetails(
                conflicting_type=type_name,
                named_qualifier=qualifier,
                providers=paths,
                singleton_count=singleton_count,
                provider_components=owners,
            ),
        )

    def detect_lifecycle_mismatches(
        self,
        components: Sequence[Component],
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """WARNING per singleton dependency with non-singleton providers."""
        non_singletons: dict[str, list[str]] = {}
        for component, provider in self.policy.active_providers(components):
            if provider.is_singleton or provider.is_collection:
                continue
            path = component.provider_path(provider)
            for type_name in dict.fromkeys((provider.return_type, provider.provides_type)):
                if type_name is not None:
                    non_singletons.setdefault(type_name, []).append(path)

        issues: list[Issue] = []
        for component in components:
            if is_blank(component.class_name) or is_excluded(component, excluded):
                continue
            for dependency in component.dependencies:
                if not dependency.is_singleton:
                    continue
                offending = non_singletons.get(dependency.target_type)
                if offending:
                    issues.append(self._lifecycle_issue(component, dependency, tuple(offending)))
        return tuple(issues)

    def _lifecycle_issue(
        self,
        component: Component,
        dependency: Dependency,
        offending: tuple[str, ...],
    ) -> Issue:
        consumer = component.fully_qualified_name
        return Issue(
            type=self.issue_type,
            severity=Severity.WARNING,
            message=(
                f"Singleton dependency '{dependency.target_type}' is provided by "
                f"non-singleton providers"
            ),
            component_name=consumer,
            source_location=component.source_file,
            suggested_fix=f"Mark providers as @Singleton: {', '.join(offending)}",
            details=LifecycleMismatchDetails(
                dependency_type=dependency.target_type,
                consumer_component=consumer,
                property_name=dependency.property_name,
                non_singleton_providers=offending,
            ),
        )
