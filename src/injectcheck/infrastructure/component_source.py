"""In-memory component source."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from injectcheck.domain.model.component import Component


class StaticComponentSource:
    """Component source over records extracted elsewhere.

    The project counts as a DI project when at least one component declares
    dependencies or providers.
    """

    def __init__(self, project_name: str, components: Iterable[Component]) -> None:
        if not project_name:
            raise ValueError("project_name must not be empty")
        self.project_name = project_name
        self._components = tuple(components)

    def is_di_project(self) -> bool:
        return any(component.has_graph_information for component in self._components)

    def load_components(self) -> tuple[Component, ...]:
        return self._components
