"""Progress reporting port."""

from __future__ import annotations

from typing import Protocol


class ProgressProtocol(Protocol):
    """Receives coarse progress between analysis phases."""

    def report(self, fraction: float, text: str) -> None:
        """Report progress.

        Args:
            fraction: Completed share in [0, 1]
            text: Phase description
        """
        ...
