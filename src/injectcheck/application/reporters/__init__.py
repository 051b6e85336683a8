"""Reporters: AnalysisResult → formatted output."""

from injectcheck.application.reporters.console import ConsoleConfig, ConsoleReporter
from injectcheck.application.reporters.strategies import (
    ByComponentStrategy,
    ByTypeStrategy,
    GroupStrategy,
)

__all__ = [
    "ByComponentStrategy",
    "ByTypeStrategy",
    "ConsoleConfig",
    "ConsoleReporter",
    "GroupStrategy",
]
