"""Resolution caches owned by one engine instance.

Explicit state with an explicit clear(). Never shared between engines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from injectcheck.domain.model.component import simple_name


class TypeMatch(IntEnum):
    """How well a requested type matches a provided type."""

    NONE = 0
    SIMPLE_NAME = 1
    EXACT = 2


@dataclass(slots=True)
class CacheStats:
    """Hit/miss counters."""

    hits: int = 0
    misses: int = 0


@dataclass(slots=True)
class ResolutionCache:
    """Type-match and provider-lookup memo tables.

    Provider lookups depend on the component set. GraphBuilder clears
    them at the start of every build; clear() drops both tables.
    """

    type_matches: dict[tuple[str, str], TypeMatch] = field(default_factory=dict)
    provider_lookups: dict[tuple[str, bool, str | None], str | None] = field(default_factory=dict)
    stats: CacheStats = field(default_factory=CacheStats)

    def match(self, requested: str, provided: str) -> TypeMatch:
        """Memoised type comparison."""
        key = (requested, provided)
        cached = self.type_matches.get(key)
        if cached is not None:
            self.stats.hits += 1
            return cached

        self.stats.misses += 1
        if requested == provided:
            result = TypeMatch.EXACT
        elif simple_name(requested) == simple_name(provided):
            result = TypeMatch.SIMPLE_NAME
        else:
            result = TypeMatch.NONE
        self.type_matches[key] = result
        return result

    def clear(self) -> None:
        """Drop all memoised entries and counters."""
        self.type_matches.clear()
        self.provider_lookups.clear()
        self.stats = CacheStats()

    def __len__(self) -> int:
        return len(self.type_matches) + len(self.provider_lookups)
