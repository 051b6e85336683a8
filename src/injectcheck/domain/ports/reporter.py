"""Reporter protocol for output formatting.

NOT rich-specific: users can adapt to any output format.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from injectcheck.domain.model.result import AnalysisResult


class ReporterProtocol(Protocol):
    """Contract for reporters.

    Output is str, caller decides the destination.
    """

    def report(self, result: AnalysisResult) -> str:
        """Format analysis result.

        Args:
            result: Complete analysis result

        Returns:
            Formatted report
        """
        ...
