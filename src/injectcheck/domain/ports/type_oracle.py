"""Type-system oracle port."""

from __future__ import annotations

from typing import Protocol


class SupertypeOracle(Protocol):
    """Answers subtype questions the extracted model cannot.

    Without an oracle, inheritance-based provider matching finds nothing.
    """

    def supertypes(self, type_name: str) -> frozenset[str]:
        """All supertypes (transitive) of type_name, fully qualified."""
        ...
