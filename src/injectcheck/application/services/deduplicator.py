"""Priority-based deduplication of detector output.

Priority is an explicit rank table, compared by integer rank, so it never
depends on enum declaration order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from injectcheck.domain.model.enums import IssueType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.graph import DependencyGraph
    from injectcheck.domain.model.issue import Issue
    from injectcheck.domain.ports.detector import DetectorProtocol

logger = logging.getLogger(__name__)

# Highest priority first. Equal ranks do not suppress each other.
ISSUE_PRIORITY: tuple[tuple[IssueType, int], ...] = (
    (IssueType.CIRCULAR_DEPENDENCY, 0),
    (IssueType.UNRESOLVED_DEPENDENCY, 1),
    (IssueType.AMBIGUOUS_PROVIDER, 2),
    (IssueType.SINGLETON_VIOLATION, 3),
    (IssueType.NAMED_QUALIFIER_MISMATCH, 3),
    (IssueType.MISSING_COMPONENT_ANNOTATION, 4),
)
_RANK: dict[IssueType, int] = dict(ISSUE_PRIORITY)


def priority_rank(issue_type: IssueType) -> int | None:
    """Rank of an issue type (0 = highest), None if unranked."""
    return _RANK.get(issue_type)


def sort_issues(issues: Iterable[Issue]) -> tuple[Issue, ...]:
    """Severity first (ERROR first), then type name. Stable for ties."""
    return tuple(sorted(issues, key=lambda issue: (issue.severity.rank, issue.type.name)))


def deduplicate(issues: Sequence[Issue]) -> tuple[Issue, ...]:
    """Two-pass priority deduplication.

    1. One issue per (component_name, type): the most severe, first wins ties.
    2. Per component_name, drop issues ranked below its top-ranked type.

    Args:
        issues: Detector output in detection order

    Returns:
        Deduplicated issues sorted by severity, then type name
    """
    best: dict[tuple[str, IssueType], Issue] = {}
    for issue in issues:
        key = (issue.component_name, issue.type)
        current = best.get(key)
        if current is None or issue.severity.rank < current.severity.rank:
            best[key] = issue

    top_rank: dict[str, int] = {}
    for issue in best.values():
        rank = priority_rank(issue.type)
        if rank is None:
            continue
        previous = top_rank.get(issue.component_name)
        if previous is None or rank < previous:
            top_rank[issue.component_name] = rank

    kept: list[Issue] = []
    for issue in best.values():
        top = top_rank.get(issue.component_name)
        rank = priority_rank(issue.type)
        if top is None or rank is None or rank == top:
            kept.append(issue)

    if len(kept) != len(issues):
        logger.debug("Deduplicated %d issues to %d", len(issues), len(kept))
    return sort_issues(kept)


@dataclass(frozen=True, slots=True)
class ExclusionSet:
    """Component names already claimed by higher-priority findings."""

    names: frozenset[str] = frozenset()

    def including(self, issues: Iterable[Issue]) -> ExclusionSet:
        """Copy extended with every component the issues implicate."""
        added = {name for issue in issues for name in issue.affected_components()}
        if added <= self.names:
            return self
        return ExclusionSet(self.names | added)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)


def detect_with_exclusions(
    detectors: Sequence[DetectorProtocol],
    components: Sequence[Component],
    graph: DependencyGraph,
) -> tuple[Issue, ...]:
    """Run detectors in priority order with a live exclusion set.

    A detector never sees components flagged by a detector of strictly
    higher priority. Detectors of equal rank share one exclusion set.
    The combined output is deduplicated.
    """
    collected: list[Issue] = []
    exclusion = ExclusionSet()
    pending: list[Issue] = []
    current_rank: int | None = None

    for detector in detectors:
        rank = priority_rank(detector.issue_type)
        if rank != current_rank:
            exclusion = exclusion.including(pending)
            pending = []
            current_rank = rank

        found = detector.detect(components, graph, exclusion.names)
        logger.debug(
            "%s: %d issues, %d components excluded",
            type(detector).__name__,
            len(found),
            len(exclusion),
        )
        collected.extend(found)
        pending.extend(found)

    return deduplicate(collected)
