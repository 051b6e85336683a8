"""Cycle enumeration and strongly connected components.

Pure functions of the graph. Both algorithms are iterative so deep chains
do not hit the recursion limit.
"""

from __future__ import annotations

from dataclasses import dataclass
from graphlib import CycleError, TopologicalSorter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from injectcheck.domain.model.graph import DependencyGraph, GraphEdge, GraphNode

ARROW = " → "


@dataclass(frozen=True, slots=True)
class Cycle:
    """One concrete cycle.

    Invariants (FAIL-FIRST):
    - len(nodes) == len(edges) == len(path) >= 1
    - edges[i] goes nodes[i] -> nodes[i + 1], the last edge closes the loop
    """

    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]
    path: tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.nodes:
            raise ValueError("cycle must have at least one node")
        if len(self.edges) != len(self.nodes):
            raise ValueError(f"edges ({len(self.edges)}) != nodes ({len(self.nodes)})")
        if len(self.path) != len(self.nodes):
            raise ValueError(f"path ({len(self.path)}) != nodes ({len(self.nodes)})")

    @property
    def length(self) -> int:
        """Number of nodes in the cycle. Self-loop is 1."""
        return len(self.nodes)

    @property
    def is_self_loop(self) -> bool:
        """Single node depending on itself."""
        return self.length == 1

    def display_path(self) -> str:
        """Labels joined by arrows, closed back to the first node."""
        labels = [node.label for node in self.nodes]
        return format_cycle_path([*labels, labels[0]])


@dataclass(frozen=True, slots=True)
class CycleReport:
    """Cycles plus SCC groupings of one graph."""

    cycles: tuple[Cycle, ...] = ()
    strongly_connected_components: tuple[tuple[str, ...], ...] = ()

    @property
    def has_cycles(self) -> bool:
        """At least one cycle found."""
        return bool(self.cycles)

    @property
    def cycle_count(self) -> int:
        """Number of distinct cycles."""
        return len(self.cycles)


def format_cycle_path(labels: Iterable[str]) -> str:
    """Join labels with an arrow for display."""
    return ARROW.join(labels)


def has_cycle(graph: DependencyGraph) -> bool:
    """Fast cycle check using graphlib.TopologicalSorter.

    Self-loops count as cycles.
    """
    ts: TopologicalSorter[str] = TopologicalSorter(graph.successors())
    try:
        ts.prepare()
    except CycleError:
        return True
    return False


def _canonical(path: list[str]) -> tuple[str, ...]:
    """Rotation of path starting at its smallest id, for deduplication."""
    start = path.index(min(path))
    return tuple(path[start:] + path[:start])


def find_cycles(graph: DependencyGraph, *, limit: int | None = None) -> tuple[Cycle, ...]:
    """Enumerate distinct cycles found by one full DFS traversal.

    A back-edge to a node still on the DFS stack yields the stack slice from
    that node to the top. Nodes may appear in several cycles. Rotations of the
    same node sequence are reported once.

    Args:
        graph: Graph to traverse
        limit: Stop after this many cycles (None = all)

    Returns:
        Cycles in discovery order
    """
    adjacency = graph.successors()
    nodes_by_id = {node.id: node for node in graph.nodes}
    first_edge: dict[tuple[str, str], GraphEdge] = {}
    for edge in graph.edges:
        first_edge.setdefault((edge.from_, edge.to), edge)

    visited: set[str] = set()
    seen_cycles: set[tuple[str, ...]] = set()
    cycles: list[Cycle] = []

    for root in adjacency:
        if root in visited:
            continue

        visited.add(root)
        path: list[str] = [root]
        position: dict[str, int] = {root: 0}
        stack = [iter(adjacency[root])]

        while stack:
            successor = next(stack[-1], None)

            if successor is None:
                stack.pop()
                del position[path.pop()]
                continue

            if successor in position:
                ring = path[position[successor] :]
                key = _canonical(ring)
                if key not in seen_cycles:
                    seen_cycles.add(key)
                    pairs = zip(ring, [*ring[1:], ring[0]], strict=True)
                    cycles.append(
                        Cycle(
                            nodes=tuple(nodes_by_id[n] for n in ring),
                            edges=tuple(first_edge[pair] for pair in pairs),
                            path=tuple(ring),
                        )
                    )
                    if limit is not None and len(cycles) >= limit:
                        return tuple(cycles)
            elif successor not in visited:
                visited.add(successor)
                position[successor] = len(path)
                path.append(successor)
                stack.append(iter(adjacency[successor]))

    return tuple(cycles)


def strongly_connected_components(graph: DependencyGraph) -> tuple[tuple[str, ...], ...]:
    """Tarjan's algorithm, iterative.

    Returns:
        Groups of size >= 2, members in graph node order, groups ordered by
        their first member's position in the graph.
    """
    adjacency = graph.successors()
    order = {node_id: i for i, node_id in enumerate(adjacency)}

    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    on_stack: set[str] = set()
    scc_stack: list[str] = []
    groups: list[tuple[str, ...]] = []
    counter = 0

    for root in adjacency:
        if root in index:
            continue

        work = [(root, iter(adjacency[root]))]
        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)

        while work:
            node, successors = work[-1]
            successor = next(successors, None)

            if successor is not None:
                if successor not in index:
                    index[successor] = lowlink[successor] = counter
                    counter += 1
                    scc_stack.append(successor)
                    on_stack.add(successor)
                    work.append((successor, iter(adjacency[successor])))
                elif successor in on_stack:
                    lowlink[node] = min(lowlink[node], index[successor])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index[node]:
                members: list[str] = []
                while True:
                    member = scc_stack.pop()
                    on_stack.discard(member)
                    members.append(member)
                    if member == node:
                        break
                if len(members) >= 2:
                    groups.append(tuple(sorted(members, key=order.__getitem__)))

    groups.sort(key=lambda group: order[group[0]])
    return tuple(groups)


def build_cycle_report(graph: DependencyGraph) -> CycleReport:
    """Cycles and SCC groupings in one report."""
    return CycleReport(
        cycles=find_cycles(graph),
        strongly_connected_components=strongly_connected_components(graph),
    )
