"""Named qualifier mismatch detector."""

from __future__ import annotations

from typing import TYPE_CHECKING

from injectcheck.application.detectors._base import BaseDetector
from injectcheck.application.detectors.providers import is_blank, is_excluded
from injectcheck.domain.model.enums import IssueType, Severity
from injectcheck.domain.model.issue import Issue, QualifierMismatchDetails
from injectcheck.domain.similarity import closest_matches

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component, Dependency
    from injectcheck.domain.model.graph import DependencyGraph


def quote_all(values: Sequence[str]) -> str:
    """'a', 'b'"""
    return ", ".join(f"'{value}'" for value in values)


def qualifier_fix(
    dependency_type: str,
    requested: str | None,
    available: Sequence[str],
    suggestions: Sequence[str],
) -> str:
    """Suggest close qualifiers, else list what exists, else a new provider."""
    if suggestions:
        return (
            f"Did you mean: {quote_all(suggestions)}? "
            f"Available qualifiers: {quote_all(available)}"
        )
    if available:
        return (
            f"Available qualifiers for {dependency_type}: {quote_all(available)}. "
            f"Or create a provider with @Named({requested}) for {dependency_type}"
        )
    return f"Create a provider with @Named({requested}) for {dependency_type}"


class NamedQualifierMismatchDetector(BaseDetector):
    """Named dependencies whose qualifier is not provided for the type.

    Types with no provider at all are left to the unresolved detector.
    """

    issue_type = IssueType.NAMED_QUALIFIER_MISMATCH

    def available_qualifiers(self, components: Sequence[Component]) -> dict[str, list[str | None]]:
        """Type -> qualifiers it is provided under (None = unqualified)."""
        available: dict[str, list[str | None]] = {}
        for component, provider in self.policy.active_providers(components):
            for type_name in dict.fromkeys((provider.return_type, provider.provides_type)):
                if type_name is None:
                    continue
                qualifiers = available.setdefault(type_name, [])
                if provider.qualifier not in qualifiers:
                    qualifiers.append(provider.qualifier)
        return available

    def detect(
        self,
        components: Sequence[Component],
        graph: DependencyGraph,
        excluded: frozenset[str] = frozenset(),
    ) -> tuple[Issue, ...]:
        """One ERROR per named dependency with an unknown qualifier."""
        available = self.available_qualifiers(components)
        issues: list[Issue] = []
        for component in components:
            if is_blank(component.class_name) or is_excluded(component, excluded):
                continue
            for dependency in component.dependencies:
                if not dependency.is_named:
                    continue
                qualifiers = available.get(dependency.target_type)
                if qualifiers is None or dependency.named_qualifier in qualifiers:
                    continue
                issues.append(self.issue_for(component, dependency, qualifiers))
        return tuple(issues)

    def issue_for(
        self,
        component: Component,
        dependency: Dependency,
        qualifiers: Sequence[str | None],
    ) -> Issue:
        """Issue for one mismatched qualifier."""
        consumer = component.fully_qualified_name
        requested = dependency.named_qualifier
        named = tuple(q for q in qualifiers if q is not None)
        suggestions = closest_matches(requested or "", named)

        return Issue(
            type=self.issue_type,
            severity=Severity.ERROR,
            message=(
                f"Named qualifier '@Named({requested})' not found for type: "
                f"{dependency.target_type}"
            ),
            component_name=consumer,
            source_location=component.source_file,
            suggested_fix=qualifier_fix(dependency.target_type, requested, named, suggestions),
            details=QualifierMismatchDetails(
                dependency_type=dependency.target_type,
                requested_qualifier=requested,
                consumer_component=consumer,
                property_name=dependency.property_name,
                available_qualifiers=named,
                suggestions=suggestions,
            ),
        )
