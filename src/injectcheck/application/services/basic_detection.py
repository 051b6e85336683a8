"""Minimal issue detection used when the detector pipeline fails.

Deliberately naive: one graph-wide cycle flag plus simple singleton and
qualifier checks, no policy filtering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from injectcheck.application.detectors.circular import CYCLE_FIX
from injectcheck.application.detectors.singleton import CONFLICT_FIX
from injectcheck.domain.model.enums import IssueType, Severity
from injectcheck.domain.model.issue import (
    Issue,
    QualifierMismatchDetails,
    SingletonConflictDetails,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component
    from injectcheck.domain.model.graph import DependencyGraph

FALLBACK_COMPONENT_NAME = "Multiple components"


def basic_issue_detection(
    components: Sequence[Component],
    graph: DependencyGraph,
) -> tuple[Issue, ...]:
    """Cycle flag, duplicate singletons and unknown qualifiers."""
    issues: list[Issue] = []

    if graph.has_cycles():
        issues.append(
            Issue(
                type=IssueType.CIRCULAR_DEPENDENCY,
                severity=Severity.ERROR,
                message="Circular dependencies detected in the dependency graph",
                component_name=FALLBACK_COMPONENT_NAME,
                suggested_fix=CYCLE_FIX,
            )
        )

    singletons: dict[str, list[str]] = {}
    qualifiers: dict[str, set[str | None]] = {}
    for component in components:
        for provider in component.providers:
            qualifiers.setdefault(provider.effective_type, set()).add(provider.qualifier)
            if provider.is_singleton:
                singletons.setdefault(provider.effective_type, []).append(
                    component.provider_path(provider)
                )

    for type_name, paths in singletons.items():
        if len(paths) > 1:
            issues.append(
                Issue(
                    type=IssueType.SINGLETON_VIOLATION,
                    severity=Severity.ERROR,
                    message=f"Multiple singleton providers found for type: {type_name}",
                    component_name=", ".join(paths),
                    suggested_fix=CONFLICT_FIX,
                    details=SingletonConflictDetails(
                        conflicting_type=type_name,
                        named_qualifier=None,
                        providers=tuple(paths),
                        singleton_count=len(paths),
                    ),
                )
            )

    for component in components:
        for dependency in component.dependencies:
            available = qualifiers.get(dependency.target_type)
            if not dependency.is_named or available is None:
                continue
            if dependency.named_qualifier in available:
                continue
            consumer = component.fully_qualified_name
            issues.append(
                Issue(
                    type=IssueType.NAMED_QUALIFIER_MISMATCH,
                    severity=Severity.ERROR,
                    message=(
                        f"Named qualifier '@Named({dependency.named_qualifier})' not found "
                        f"for type: {dependency.target_type}"
                    ),
                    component_name=consumer,
                    details=QualifierMismatchDetails(
                        dependency_type=dependency.target_type,
                        requested_qualifier=dependency.named_qualifier,
                        consumer_component=consumer,
                        property_name=dependency.property_name,
                        available_qualifiers=tuple(sorted(q for q in available if q is not None)),
                    ),
                )
            )

    return tuple(issues)
