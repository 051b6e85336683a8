"""Unresolved dependency detector.

Lookup order for each dependency: exact (type, qualifier), the explicit
"unnamed" qualifier for unqualified requests, simple-name match, generic
relaxation, then inheritance via an optional SupertypeOracle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self, TypeAlias

from injectcheck.application.detectors._base import BaseDetector
from injectcheck.application.detectors.providers import (
    ProviderPolicy,
    is_blank,
    is_excluded,
    is_well_formed,
)
from injectcheck.domain.model.component import base_type, simple_name
from injectcheck.domain.model.enums import IssueType, Severity
from injectcheck.domain.model.issue import Issue, UnresolvedDependencyDetails

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component, Dependency
    from injectcheck.domain.model.configuration import AnalysisConfig
    from injectcheck.domain.model.graph import DependencyGraph
    from injectcheck.domain.ports.type_oracle import SupertypeOracle

UNNAMED_QUALIFIER = "unnamed"

ProviderKey: TypeAlias = tuple[str, str | None]


def provider_key(type_name: str, qualifier: str | None) -> str:
    """Display key: 'type' or 'type@qualifier'."""
    return type_name if qualifier is None else f"{type_name}@{qualifier}"


def describe_qualifier(qualifier: str | None) -> str:
    """'@Named(q)' or 'unqualified'."""
    return "unqualified" if qualifier is None else f"@Named({qualifier})"


@dataclass(slots=True)
class ProviderIndex:
    """Providers keyed for dependency lookup.

    Attributes:
        exact: (type, qualifier) -> provider paths
        by_simple_name: (simple type name, qualifier) -> provider paths
        generic: (base type, qualifier) -> paths of generic providers
        entries: (type, qualifier, path) for every indexed type
    """

    exact: dict[ProviderKey, list[str]] = field(default_factory=dict)
    by_simple_name: dict[ProviderKey, list[str]] = field(default_factory=dict)
    generic: dict[ProviderKey, list[str]] = field(default_factory=dict)
    entries: list[tuple[str, str | None, str]] = field(default_factory=list)

    @classmethod
    def build(cls, components: Sequence[Component], policy: ProviderPolicy) -> Self:
        """Index well-formed providers by return type and provides type.

        Suspicious-name filtering is NOT applied: a provider that exists at
        all resolves the dependency.
        """
        index = cls()
        for component in components:
            if policy.is_ignored(component):
                continue
            for provider in component.providers:
                if not is_well_formed(provider):
                    continue
                path = component.provider_path(provider)
                for type_name in dict.fromkeys((provider.return_type, provider.provides_type)):
                    if type_name is not None:
                        index.add(type_name, provider.qualifier, path)
        return index

    def add(self, type_name: str, qualifier: str | None, path: str) -> None:
        """Index one provider type."""
        self.exact.setdefault((type_name, qualifier), []).append(path)
        self.by_simple_name.setdefault((simple_name(type_name), qualifier), []).append(path)
        if "<" in type_name:
            self.generic.setdefault((base_type(type_name), qualifier), []).append(path)
        self.entries.append((type_name, qualifier, path))


class UnresolvedDependencyDetector(BaseDetector):
    """Reports dependencies no provider can satisfy."""

    issue_type = IssueType.UNRESOLVED_DEPENDENCY

    def __init__(
        self,
        policy: ProviderPolicy | None = None,
        oracle: SupertypeOracle | None = None,
    ) -> None:
        """Initialize detector.

        Args:
            policy: Provider validity policy
            oracle: Type-system oracle for inheritance matches. None = no
                inheritance resolution.
        """
        super().__init__(policy)
        self._oracle = oracle

    @classmethod
    def from_config(
        cls,
        config: AnalysisConfig,
        oracle: SupertypeOracle | None = None,
    ) -> Self:
        """Always enabled; passes the oracle through."""
        return cls(ProviderPolicy.from_config(config), oracle)

    def detect(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """One ERROR per unresolvable dependency of a non-excluded component.

        The index covers every component; only consumers are excluded.
        """
        index = ProviderIndex.build(components, self.policy)
        issues: list[Issue] = []
        for component in components:
            if is_blank(component.class_name) or is_excluded(component, excluded):
                continue
            for dependency in component.dependencies:
                if is_blank(dependency.target_type):
                    continue
                if self.find_matches(dependency, index):
                    continue
                issues.append(self.issue_for(component, dependency, index))
        return tuple(issues)

    def find_matches(self, dependency: Dependency, index: ProviderIndex) -> tuple[str, ...]:
        """Provider paths satisfying the dependency, first matching rule wins."""
        target = dependency.target_type
        qualifier = dependency.qualifier

        found = index.exact.get((target, qualifier))
        if not found and qualifier is None:
            found = index.exact.get((target, UNNAMED_QUALIFIER))
        if not found:
            found = index.by_simple_name.get((simple_name(target), qualifier))
        if not found:
            found = index.generic.get((base_type(target), qualifier))
        if found:
            return tuple(found)
        return self.find_inheritance_matches(dependency, index)

    def find_inheritance_matches(
        self,
        dependency: Dependency,
        index: ProviderIndex,
    ) -> tuple[str, ...]:
        """Providers whose type is a subtype of the requested type.

        Needs full type information: always empty without an oracle.
        """
        if self._oracle is None:
            return ()
        target = dependency.target_type
        qualifier = dependency.qualifier
        return tuple(
            path
            for type_name, provided_qualifier, path in index.entries
            if provided_qualifier == qualifier and target in self._oracle.supertypes(type_name)
        )

    def near_misses(self, dependency: Dependency, index: ProviderIndex) -> tuple[str, ...]:
        """Providers of the same base type under a different qualifier."""
        wanted = simple_name(base_type(dependency.target_type))
        qualifier = dependency.qualifier
        misses = [
            f"{path} ({describe_qualifier(provided_qualifier)})"
            for type_name, provided_qualifier, path in index.entries
            if simple_name(base_type(type_name)) == wanted and provided_qualifier != qualifier
        ]
        return tuple(dict.fromkeys(misses))

    def issue_for(
        self,
        component: Component,
        dependency: Dependency,
        index: ProviderIndex,
    ) -> Issue:
        """Issue for one unresolved dependency."""
        consumer = component.fully_qualified_name
        target = dependency.target_type
        qualifier = dependency.qualifier
        requested = target if qualifier is None else f"{target} with @Named({qualifier})"
        misses = self.near_misses(dependency, index)

        return Issue(
            type=self.issue_type,
            severity=Severity.ERROR,
            message=(
                f"Unresolved dependency: no provider found for {requested} "
                f"required by {consumer}.{dependency.property_name}"
            ),
            component_name=consumer,
            source_location=component.source_file,
            suggested_fix=unresolved_fix(dependency, misses),
            details=UnresolvedDependencyDetails(
                target_type=target,
                property_name=dependency.property_name,
                is_named=dependency.is_named,
                named_qualifier=dependency.named_qualifier,
                consumer_component=consumer,
                near_misses=misses,
            ),
        )


def unresolved_fix(dependency: Dependency, near_misses: Sequence[str]) -> str:
    """Fix text: provider template, injection-mode hints, near misses."""
    target = dependency.target_type
    qualifier = dependency.qualifier
    method = "provide" + simple_name(base_type(target))
    annotations = "@Provides" if qualifier is None else f'@Provides @Named("{qualifier}")'

    if qualifier is None:
        lines = [f"Add a provider for {target}:"]
    else:
        lines = [f"Add a provider for {target} with @Named({qualifier}):"]
    lines.append(f"  {annotations} fun {method}(): {target}")

    if dependency.is_factory:
        lines.append(f"Factory injection of {target} needs a provider of the produced type.")
    if dependency.is_loadable:
        lines.append(f"Loadable injection of {target} needs a provider of the loaded type.")
    if near_misses:
        lines.append("Providers of a similar type exist under another qualifier:")
        lines.extend(f"  - {miss}" for miss in near_misses)
    return "\n".join(lines)
