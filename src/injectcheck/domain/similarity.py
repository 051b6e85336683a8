"""String similarity helpers for fix suggestions. Pure, no I/O."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_MAX_DISTANCE = 2


def levenshtein(a: str, b: str) -> int:
    """Edit distance (insert, delete, substitute; each cost 1)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def closest_matches(
    target: str,
    candidates: Iterable[str],
    max_distance: int = DEFAULT_MAX_DISTANCE,
) -> tuple[str, ...]:
    """Candidates within max_distance of target, case-insensitive.

    Sorted by distance ascending; ties keep candidate order.
    """
    normalized = target.lower()
    scored = [
        (levenshtein(normalized, candidate.lower()), candidate)
        for candidate in dict.fromkeys(candidates)
    ]
    close = [pair for pair in scored if pair[0] <= max_distance]
    close.sort(key=lambda pair: pair[0])
    return tuple(candidate for _, candidate in close)
