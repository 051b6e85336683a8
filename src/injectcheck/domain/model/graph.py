"""Dependency graph: component and provider-method nodes, typed edges.

Multigraph: parallel edges between the same pair are allowed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from injectcheck.domain.model.enums import EdgeKind, NodeKind

if TYPE_CHECKING:
    from injectcheck.domain.model.cycle import CycleReport
    from injectcheck.domain.model.issue import Issue


@dataclass(frozen=True, slots=True)
class GraphNode:
    """Graph node.

    Attributes:
        id: Unique node id (pkg.Class or pkg.Class.method)
        label: Display label
        kind: Component or synthetic provider-method node
        package_name: Package of the owning component
        issues: Issues attached to this node
    """

    id: str
    label: str
    kind: NodeKind
    package_name: str
    issues: tuple[Issue, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.id:
            raise ValueError("id must not be empty")


@dataclass(frozen=True, slots=True)
class GraphEdge:
    """Directed edge.

    Attributes:
        from_: Source node id
        to: Target node id
        kind: Edge kind
        label: Display label
    """

    from_: str
    to: str
    kind: EdgeKind
    label: str | None = None


@dataclass(frozen=True, slots=True)
class DependencyGraph:
    """Immutable directed multigraph.

    Invariants:
        - node ids are unique
        - every edge endpoint is a node
    """

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        ids: set[str] = set()
        for node in self.nodes:
            if node.id in ids:
                raise ValueError(f"duplicate node id '{node.id}'")
            ids.add(node.id)
        for edge in self.edges:
            if edge.from_ not in ids:
                raise ValueError(f"edge source '{edge.from_}' not in nodes")
            if edge.to not in ids:
                raise ValueError(f"edge target '{edge.to}' not in nodes")

    @classmethod
    def from_edges(cls, pairs: tuple[tuple[str, str], ...]) -> DependencyGraph:
        """Build a graph of component nodes from (from, to) id pairs.

        Labels are the last dotted segment of each id.
        """
        seen: dict[str, GraphNode] = {}
        for pair in pairs:
            for node_id in pair:
                if node_id not in seen:
                    package, _, label = node_id.rpartition(".")
                    seen[node_id] = GraphNode(node_id, label, NodeKind.COMPONENT, package)
        edges = tuple(GraphEdge(a, b, EdgeKind.DEPENDENCY) for a, b in pairs)
        return cls(nodes=tuple(seen.values()), edges=edges)

    def find_node(self, node_id: str) -> GraphNode | None:
        """Node by id, or None."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def successors(self) -> dict[str, list[str]]:
        """Adjacency map in edge order. Every node has an entry."""
        adjacency: dict[str, list[str]] = {node.id: [] for node in self.nodes}
        for edge in self.edges:
            adjacency[edge.from_].append(edge.to)
        return adjacency

    def connected_nodes(self, node_id: str) -> tuple[GraphNode, ...]:
        """Nodes adjacent to node_id in either direction, in node order."""
        linked: set[str] = set()
        for edge in self.edges:
            if edge.from_ == node_id:
                linked.add(edge.to)
            elif edge.to == node_id:
                linked.add(edge.from_)
        return tuple(node for node in self.nodes if node.id in linked)

    def edges_between(self, from_: str, to: str) -> tuple[GraphEdge, ...]:
        """All parallel edges from_ -> to."""
        return tuple(e for e in self.edges if e.from_ == from_ and e.to == to)

    @property
    def dependency_edge_count(self) -> int:
        """Edges other than PROVIDES."""
        return sum(1 for e in self.edges if e.kind is not EdgeKind.PROVIDES)

    def has_cycles(self) -> bool:
        """Graph contains at least one cycle (self-loops included)."""
        from injectcheck.domain.model.cycle import has_cycle

        return has_cycle(self)

    def cycle_report(self) -> CycleReport:
        """Cycles and strongly connected components."""
        from injectcheck.domain.model.cycle import build_cycle_report

        return build_cycle_report(self)

    def strongly_connected_components(self) -> tuple[tuple[str, ...], ...]:
        """SCC member groups of size >= 2."""
        from injectcheck.domain.model.cycle import strongly_connected_components

        return strongly_connected_components(self)
