"""Issue validator: re-derives a verdict and confidence for each issue.

Independent of the detectors' own certainty. A check that fails on one
issue degrades only that issue to VALIDATION_FAILED.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from injectcheck.domain.model.component import base_type, simple_name
from injectcheck.domain.model.configuration import AnalysisConfig
from injectcheck.domain.model.enums import IssueType, ValidationStatus
from injectcheck.domain.model.graph import DependencyGraph
from injectcheck.domain.model.issue import (
    AmbiguousProviderDetails,
    CircularDependencyDetails,
    LifecycleMismatchDetails,
    QualifierMismatchDetails,
    SingletonConflictDetails,
    UnresolvedDependencyDetails,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from injectcheck.domain.model.component import Component, Provider
    from injectcheck.domain.model.issue import Issue
    from injectcheck.domain.ports.source import SourceReaderProtocol

logger = logging.getLogger(__name__)

COMPONENT_NAME_SEPARATORS = re.compile(r", | -> | → | ↔ ")


@dataclass(frozen=True, slots=True)
class Verdict:
    """Validation outcome for one issue."""

    status: ValidationStatus
    confidence: float

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be in [0, 1], got {self.confidence}")


def true_positive(confidence: float) -> Verdict:
    return Verdict(ValidationStatus.VALIDATED_TRUE_POSITIVE, confidence)


def false_positive(confidence: float) -> Verdict:
    return Verdict(ValidationStatus.VALIDATED_FALSE_POSITIVE, confidence)


FAILED = Verdict(ValidationStatus.VALIDATION_FAILED, 0.5)


def parse_component_names(component_name: str) -> tuple[str, ...]:
    """Split a joined component name on list and arrow separators."""
    return tuple(part.strip() for part in COMPONENT_NAME_SEPARATORS.split(component_name))


def find_component(name: str, components: Sequence[Component]) -> Component | None:
    """Component by simple or fully qualified name."""
    for component in components:
        if component.matches_name(name):
            return component
    return None


def provider_supplies(provider: Provider, type_name: str) -> bool:
    """Exact return/provides type, or return type ending with the name."""
    return provider.supplies(type_name) or provider.return_type.endswith(type_name)


def circular_confidence(component_count: int, internal_edges: int) -> float:
    """min(0.98, max(0.85, base + 0.1 * edges)); base 0.8 for 2+ components else 0.7."""
    base = 0.8 if component_count >= 2 else 0.7
    return min(0.98, max(0.85, base + 0.1 * internal_edges))


def internal_edges(components: Sequence[Component]) -> tuple[tuple[str, str], ...]:
    """Dependency edges among the given components only, self-references included.

    A dependency links to a component whose class it names or which has a
    provider for the requested type.
    """
    pairs: list[tuple[str, str]] = []
    for consumer in components:
        for dependency in consumer.dependencies:
            wanted = simple_name(base_type(dependency.target_type))
            for target in components:
                named = target.class_name == wanted
                provided = any(
                    simple_name(base_type(p.effective_type)) == wanted
                    or simple_name(base_type(p.return_type)) == wanted
                    for p in target.providers
                )
                if named or provided:
                    pairs.append((consumer.fully_qualified_name, target.fully_qualified_name))
    return tuple(dict.fromkeys(pairs))


class IssueValidator:
    """Assigns validation status and confidence to issues.

    Attributes:
        _config: Analysis configuration (toggle and threshold)
        _source_reader: Optional reader for spotting commented-out code
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        source_reader: SourceReaderProtocol | None = None,
    ) -> None:
        """Initialize validator.

        Args:
            config: Analysis configuration. Defaults if None.
            source_reader: Source reader. Without one nothing counts as commented out.
        """
        self._config = config or AnalysisConfig()
        self._source_reader = source_reader
        self._checks: dict[IssueType, Callable[[Issue, Sequence[Component]], Verdict]] = {
            IssueType.CIRCULAR_DEPENDENCY: self.check_circular,
            IssueType.AMBIGUOUS_PROVIDER: self.check_ambiguous,
            IssueType.UNRESOLVED_DEPENDENCY: self.check_unresolved,
            IssueType.SINGLETON_VIOLATION: self.check_singleton,
            IssueType.NAMED_QUALIFIER_MISMATCH: self.check_qualifier,
            IssueType.MISSING_COMPONENT_ANNOTATION: self.check_missing_annotation,
        }

    def validate_issues(
        self,
        issues: Sequence[Issue],
        components: Sequence[Component],
    ) -> tuple[Issue, ...]:
        """Validate every issue, then drop low-confidence ones.

        With validation disabled issues pass through unchanged.
        """
        if not self._config.validation_enabled:
            return tuple(issues)

        validated = [self.validate_issue(issue, components) for issue in issues]
        kept = filter_by_confidence(validated, self._config.minimum_confidence_threshold)
        logger.info(
            "Validated %d issues, kept %d (threshold %.2f)",
            len(validated),
            len(kept),
            self._config.minimum_confidence_threshold,
        )
        return kept

    def validate_issue(self, issue: Issue, components: Sequence[Component]) -> Issue:
        """Issue with its verdict applied. Never raises."""
        check = self._checks[issue.type]
        try:
            verdict = check(issue, components)
        except Exception:
            logger.warning("Validation failed for %s issue", issue.type.name, exc_info=True)
            verdict = FAILED
        return issue.with_validation(verdict.status, verdict.confidence)

    # Circular dependencies

    def check_circular(self, issue: Issue, components: Sequence[Component]) -> Verdict:
        """Confirm every named component exists and that they form a cycle."""
        if isinstance(issue.details, CircularDependencyDetails):
            names = issue.details.affected_components
        else:
            names = parse_component_names(issue.component_name)
        if not names or any(not name.strip() for name in names):
            return FAILED

        involved: dict[str, Component] = {}
        for name in names:
            component = find_component(name, components)
            if component is None:
                return false_positive(0.2)
            involved.setdefault(component.fully_qualified_name, component)

        members = tuple(involved.values())
        edges = internal_edges(members)
        if not edges or not DependencyGraph.from_edges(edges).has_cycles():
            return false_positive(0.2)
        return true_positive(circular_confidence(len(members), len(edges)))

    # Ambiguous providers

    def check_ambiguous(self, issue: Issue, components: Sequence[Component]) -> Verdict:
        """Count live providers of the claimed type and qualifier."""
        details = issue.details
        if not isinstance(details, AmbiguousProviderDetails):
            raise TypeError("ambiguous provider issue without provider details")

        qualifier = details.named_qualifier if details.is_named_conflict else None
        survivors = 0
        for component in components:
            for provider in component.providers:
                if provider.is_collection or provider.qualifier != qualifier:
                    continue
                if not provider_supplies(provider, details.provided_type):
                    continue
                if self.is_commented_out(component, re.escape(provider.method_name)):
                    continue
                survivors += 1

        if survivors >= 2:
            return true_positive(0.95)
        if survivors == 1:
            return false_positive(0.15)
        return false_positive(0.1)

    # Unresolved dependencies

    def check_unresolved(self, issue: Issue, components: Sequence[Component]) -> Verdict:
        """Confirm the consumer exists and no provider supplies the type."""
        details = issue.details
        if not isinstance(details, UnresolvedDependencyDetails):
            raise TypeError("unresolved dependency issue without dependency details")

        consumer = find_component(details.consumer_component, components)
        if consumer is None:
            return false_positive(0.1)

        wanted = simple_name(base_type(details.target_type))
        pattern = rf"\b{re.escape(details.property_name)}\b.*{re.escape(wanted)}"
        if self.is_commented_out(consumer, pattern):
            return false_positive(0.1)

        qualifier = details.named_qualifier if details.is_named else None
        for component in components:
            if qualifier is None and component.class_name == wanted:
                return false_positive(0.2)
            for provider in component.providers:
                if provider.qualifier != qualifier:
                    continue
                if provider_supplies(provider, details.target_type) or provider_supplies(
                    provider, wanted
                ):
                    return false_positive(0.2)
        return true_positive(0.9)

    # Singleton violations

    def check_singleton(self, issue: Issue, components: Sequence[Component]) -> Verdict:
        """Re-count conflicting providers or non-singleton suppliers."""
        details = issue.details
        if isinstance(details, SingletonConflictDetails):
            matching = [
                provider
                for component in components
                for provider in component.providers
                if not provider.is_collection
                and provider.qualifier == details.named_qualifier
                and provider_supplies(provider, details.conflicting_type)
            ]
            if details.singleton_count > 1:
                matching = [p for p in matching if p.is_singleton]
            return true_positive(0.9) if len(matching) > 1 else false_positive(0.2)

        if isinstance(details, LifecycleMismatchDetails):
            consumer = find_component(details.consumer_component, components)
            if consumer is None:
                return false_positive(0.2)
            offending = any(
                not provider.is_singleton and provider.supplies(details.dependency_type)
                for component in components
                for provider in component.providers
            )
            return true_positive(0.9) if offending else false_positive(0.2)

        raise TypeError("singleton violation issue without singleton details")

    # Named qualifier mismatches

    def check_qualifier(self, issue: Issue, components: Sequence[Component]) -> Verdict:
        """Confirm no provider offers the requested qualifier."""
        details = issue.details
        if not isinstance(details, QualifierMismatchDetails):
            raise TypeError("qualifier mismatch issue without qualifier details")

        if find_component(details.consumer_component, components) is None:
            return false_positive(0.2)

        provided = any(
            provider.is_named
            and provider.named_qualifier == details.requested_qualifier
            and provider.supplies(details.dependency_type)
            for component in components
            for provider in component.providers
        )
        return false_positive(0.25) if provided else true_positive(0.8)

    # Missing annotations

    def check_missing_annotation(self, issue: Issue, components: Sequence[Component]) -> Verdict:
        """Component exists and takes part in injection."""
        component = find_component(issue.component_name, components)
        if component is None:
            return false_positive(0.1)
        return true_positive(0.7) if component.has_graph_information else false_positive(0.25)

    def is_commented_out(self, component: Component, pattern: str) -> bool:
        """A '//' line comment in the component's source matches pattern."""
        if self._source_reader is None or component.source_file is None:
            return False
        text = self._source_reader.read(component.source_file)
        if text is None:
            return False
        return re.search(rf"//.*{pattern}", text, re.MULTILINE) is not None


def filter_by_confidence(issues: Iterable[Issue], threshold: float) -> tuple[Issue, ...]:
    """Keep issues at or above threshold, plus every confirmed false positive."""
    return tuple(
        issue
        for issue in issues
        if issue.confidence_score >= threshold
        or issue.validation_status is ValidationStatus.VALIDATED_FALSE_POSITIVE
    )
