"""Dependency graph builder from component records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from injectcheck.application.graph.cache import ResolutionCache, TypeMatch
from injectcheck.domain.model.component import simple_name
from injectcheck.domain.model.enums import EdgeKind, NodeKind
from injectcheck.domain.model.graph import DependencyGraph, GraphEdge, GraphNode

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component, Dependency, Provider

logger = logging.getLogger(__name__)

PROVIDES_LABEL = "provides"


def edge_kind_for(dependency: Dependency) -> EdgeKind:
    """Edge kind by flag priority: SINGLETON > FACTORY > NAMED > DEPENDENCY."""
    if dependency.is_singleton:
        return EdgeKind.SINGLETON
    if dependency.is_factory:
        return EdgeKind.FACTORY
    if dependency.is_named:
        return EdgeKind.NAMED
    return EdgeKind.DEPENDENCY


def edge_label_for(dependency: Dependency) -> str:
    """Property name, plus the qualifier when named."""
    if dependency.is_named:
        return f"{dependency.property_name} (@Named({dependency.named_qualifier}))"
    return dependency.property_name


def qualifier_matches(dependency: Dependency, provider: Provider) -> bool:
    """Unnamed only matches unnamed; named requires equal qualifiers."""
    if dependency.is_named != provider.is_named:
        return False
    return not dependency.is_named or dependency.named_qualifier == provider.named_qualifier


class GraphBuilder:
    """Builds a DependencyGraph from components.

    Deterministic for a given input order. The only state is the optional
    ResolutionCache. Provider lookups are scoped to one build() call, so a
    builder can be reused across unrelated component lists.
    """

    def __init__(self, cache: ResolutionCache | None = None) -> None:
        """Initialize builder.

        Args:
            cache: Shared resolution cache. A private one is used if None.
        """
        self._cache = cache if cache is not None else ResolutionCache()

    def build(self, components: Sequence[Component]) -> DependencyGraph:
        """Build graph.

        Components without dependencies and providers are dropped. Each
        provider gets a synthetic node and a PROVIDES edge. Each resolved
        dependency becomes one component-to-component edge; unresolved
        dependencies produce no edge.

        Args:
            components: Components in stable order

        Returns:
            DependencyGraph
        """
        unique: dict[str, Component] = {}
        for component in components:
            if not component.has_graph_information or not component.class_name.strip():
                continue
            node_id = component.fully_qualified_name
            if node_id in unique:
                logger.debug("Duplicate component %s ignored", node_id)
                continue
            unique[node_id] = component

        nodes: dict[str, GraphNode] = {
            node_id: GraphNode(
                id=node_id,
                label=component.class_name,
                kind=NodeKind.COMPONENT,
                package_name=component.package_name,
            )
            for node_id, component in unique.items()
        }
        edges: list[GraphEdge] = []
        resolvable = tuple(unique.values())
        self._cache.provider_lookups.clear()

        for node_id, component in unique.items():
            for provider in component.providers:
                provider_id = component.provider_path(provider)
                if provider_id not in nodes:
                    nodes[provider_id] = GraphNode(
                        id=provider_id,
                        label=f"{provider.method_name}(): {provider.effective_type}",
                        kind=NodeKind.PROVIDER,
                        package_name=component.package_name,
                    )
                edges.append(GraphEdge(node_id, provider_id, EdgeKind.PROVIDES, PROVIDES_LABEL))

            for dependency in component.dependencies:
                target = self.resolve(dependency, resolvable)
                if target is None:
                    logger.debug(
                        "No provider for %s.%s: %s",
                        node_id,
                        dependency.property_name,
                        dependency.target_type,
                    )
                    continue
                edges.append(
                    GraphEdge(
                        node_id,
                        target,
                        edge_kind_for(dependency),
                        edge_label_for(dependency),
                    )
                )

        logger.debug("Built graph: %d nodes, %d edges", len(nodes), len(edges))
        return DependencyGraph(nodes=tuple(nodes.values()), edges=tuple(edges))

    def resolve(self, dependency: Dependency, components: Sequence[Component]) -> str | None:
        """Find the component that satisfies a dependency.

        Order: exact provided-type match, then simple-name match (both with
        qualifier equality), then an unnamed dependency naming a component
        class directly.

        Returns:
            Fully qualified name of the providing component, or None
        """
        key = (dependency.target_type, dependency.is_named, dependency.named_qualifier)
        lookups = self._cache.provider_lookups
        if key in lookups:
            cached = lookups[key]
            known = {c.fully_qualified_name for c in components}
            if cached is not None and cached in known:
                return cached

        result = self._resolve_uncached(dependency, components)
        lookups[key] = result
        return result

    def _resolve_uncached(
        self,
        dependency: Dependency,
        components: Sequence[Component],
    ) -> str | None:
        target = dependency.target_type

        for level in (TypeMatch.EXACT, TypeMatch.SIMPLE_NAME):
            for component in components:
                for provider in component.providers:
                    if not qualifier_matches(dependency, provider):
                        continue
                    if self._best_match(target, provider) >= level:
                        return component.fully_qualified_name

        if not dependency.is_named:
            target_simple = simple_name(target)
            for component in components:
                if target in (component.fully_qualified_name, component.class_name):
                    return component.fully_qualified_name
                if component.class_name == target_simple:
                    return component.fully_qualified_name

        return None

    def _best_match(self, target: str, provider: Provider) -> TypeMatch:
        best = self._cache.match(target, provider.return_type)
        if provider.provides_type is not None:
            best = max(best, self._cache.match(target, provider.provides_type))
        return best
