"""Circular dependency detector.

Reports every cycle of the graph plus strongly connected clusters that no
single reported cycle covers. Always enabled; runs first in the pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from injectcheck.application.detectors._base import BaseDetector
from injectcheck.domain.model.enums import IssueType, Severity
from injectcheck.domain.model.issue import CircularDependencyDetails, Issue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.cycle import Cycle
    from injectcheck.domain.model.graph import DependencyGraph

CYCLE_FIX = (
    "Break the cycle by: 1) Using dependency injection interfaces, "
    "2) Introducing a mediator component, or 3) Restructuring component relationships"
)
SCC_FIX = "Consider restructuring these tightly coupled components"

# Cycles of this many nodes are errors; longer ones are likely incidental.
ERROR_CYCLE_LENGTHS = range(2, 5)
MIN_SCC_SIZE = 3


def cycle_severity(length: int) -> Severity:
    """ERROR for 2-4 node cycles, WARNING otherwise (self-loops included)."""
    return Severity.ERROR if length in ERROR_CYCLE_LENGTHS else Severity.WARNING


class CircularDependencyDetector(BaseDetector):
    """Cycle and SCC detector over the dependency graph.

    Ignores the exclusion set: nothing outranks a cycle.
    """

    issue_type = IssueType.CIRCULAR_DEPENDENCY

    def detect(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """Detect cycles and uncovered strongly connected clusters."""
        report = graph.cycle_report()
        issues = [self.issue_for_cycle(cycle) for cycle in report.cycles]

        covered = {frozenset(cycle.path) for cycle in report.cycles}
        for members in report.strongly_connected_components:
            if len(members) >= MIN_SCC_SIZE and frozenset(members) not in covered:
                issues.append(self.issue_for_cluster(members, graph))

        return tuple(issues)

    def issue_for_cycle(self, cycle: Cycle) -> Issue:
        """Issue describing one cycle."""
        return Issue(
            type=self.issue_type,
            severity=cycle_severity(cycle.length),
            message=f"Circular dependency detected: {cycle.display_path()}",
            component_name=", ".join(cycle.path),
            suggested_fix=CYCLE_FIX,
            details=CircularDependencyDetails(
                cycle_length=cycle.length,
                cycle_path=cycle.path,
                affected_components=cycle.path,
            ),
        )

    def issue_for_cluster(self, members: tuple[str, ...], graph: DependencyGraph) -> Issue:
        """Issue describing a strongly connected cluster."""
        labels = []
        for member in members:
            node = graph.find_node(member)
            labels.append(node.label if node is not None else member)

        return Issue(
            type=self.issue_type,
            severity=Severity.WARNING,
            message=(
                f"Circular dependency cluster: strongly connected component detected "
                f"with {len(members)} components ({', '.join(labels)})"
            ),
            component_name=", ".join(members),
            suggested_fix=SCC_FIX,
            details=CircularDependencyDetails(
                cycle_length=len(members),
                cycle_path=members,
                affected_components=members,
                strongly_connected=True,
            ),
        )
