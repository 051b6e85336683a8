"""Ambiguous provider detector.

A type is ambiguous when two providers share a named qualifier or when two
unqualified providers exist. Multibinding contributions never conflict.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from injectcheck.application.detectors._base import BaseDetector
from injectcheck.application.detectors.providers import all_excluded
from injectcheck.domain.model.component import base_type, simple_name
from injectcheck.domain.model.enums import IssueType, Severity
from injectcheck.domain.model.issue import AmbiguousProviderDetails, Issue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component, Provider
    from injectcheck.domain.model.graph import DependencyGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProviderEntry:
    """Provider with its owner and fully qualified method path."""

    component: Component
    provider: Provider
    path: str


def find_conflict(entries: Sequence[ProviderEntry]) -> tuple[tuple[ProviderEntry, ...], str | None]:
    """Conflicting providers of one type.

    Returns:
        (conflicting entries, colliding qualifier). Entries are empty when
        the group is not ambiguous. The qualifier is None for unqualified
        duplicates.
    """
    qualifiers = Counter(e.provider.named_qualifier for e in entries if e.provider.is_named)
    duplicated = [q for q, count in qualifiers.items() if count > 1]
    if duplicated:
        qualifier = duplicated[0]
        conflicting = tuple(
            e for e in entries if e.provider.is_named and e.provider.named_qualifier == qualifier
        )
        return conflicting, qualifier

    unqualified = tuple(e for e in entries if not e.provider.is_named)
    if len(unqualified) > 1:
        return unqualified, None
    return (), None


def ambiguity_fix(provided_type: str, paths: Sequence[str], *, named_conflict: bool) -> str:
    """Suggested fix text for an ambiguous group."""
    if named_conflict:
        lines = ["Use different @Named qualifiers or remove duplicate providers:"]
        lines.extend(f"  {path}" for path in paths)
    else:
        stem = simple_name(base_type(provided_type))
        lines = ["Use @Named qualifiers to distinguish between providers:"]
        lines.extend(f'  @Named("{stem}_{i}") {path}' for i, path in enumerate(paths, start=1))
    return "\n".join(lines)


class AmbiguousProviderDetector(BaseDetector):
    """Groups active, non-collection providers by effective type."""

    issue_type = IssueType.AMBIGUOUS_PROVIDER

    def group_providers(
        self,
        components: Sequence[Component],
    ) -> dict[str, tuple[ProviderEntry, ...]]:
        """Active providers grouped by effective type, deduplicated by path."""
        groups: dict[str, dict[str, ProviderEntry]] = {}
        for component, provider in self.policy.active_providers(components):
            if provider.is_collection:
                continue
            path = component.provider_path(provider)
            groups.setdefault(provider.effective_type, {}).setdefault(
                path, ProviderEntry(component, provider, path)
            )
        return {t: tuple(entries.values()) for t, entries in groups.items()}

    def detect(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """One ERROR per ambiguous provided type.

        Groups include providers of excluded components. A conflict is only
        dropped when every component owning one of its providers is excluded.
        """
        issues: list[Issue] = []
        for provided_type, entries in self.group_providers(components).items():
            if len(entries) < 2:
                continue
            conflicting, qualifier = find_conflict(entries)
            if conflicting and not all_excluded((e.component for e in conflicting), excluded):
                issues.append(self.issue_for(provided_type, conflicting, qualifier))
        return tuple(issues)

    def issue_for(
        self,
        provided_type: str,
        conflicting: tuple[ProviderEntry, ...],
        qualifier: str | None,
    ) -> Issue:
        """Issue for one conflicting group."""
        named_conflict = qualifier is not None
        paths = tuple(e.path for e in conflicting)
        owners = tuple(dict.fromkeys(e.component.fully_qualified_name for e in conflicting))
        logger.warning("Ambiguous providers for %s: %s", provided_type, ", ".join(paths))

        if named_conflict:
            message = f"Multiple providers found for type: {provided_type} with same qualifier"
        else:
            message = f"Multiple providers found for type: {provided_type} without qualifiers"

        return Issue(
            type=self.issue_type,
            severity=Severity.ERROR,
            message=message,
            component_name=", ".join(paths),
            suggested_fix=ambiguity_fix(provided_type, paths, named_conflict=named_conflict),
            details=AmbiguousProviderDetails(
                provided_type=provided_type,
                is_named_conflict=named_conflict,
                provider_count=len(paths),
                providers=paths,
                named_qualifier=qualifier,
                provider_components=owners,
            ),
        )
