"""Ports to the extraction side: component records and source text."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectcheck.domain.model.component import Component


class ComponentSourceProtocol(Protocol):
    """Supplies extracted component records for one project.

    Extraction (source or bytecode parsing) happens behind this port.
    """

    project_name: str

    def is_di_project(self) -> bool:
        """Project uses a supported DI framework."""
        ...

    def load_components(self) -> Sequence[Component]:
        """Extracted components in stable order."""
        ...


class SourceReaderProtocol(Protocol):
    """Reads the declaring source file of a component.

    Used only to spot commented-out declarations during validation.
    """

    def read(self, source_file: str) -> str | None:
        """Source text, or None if unavailable."""
        ...
