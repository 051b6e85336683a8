"""injectcheck - static analysis of dependency-injection graphs."""

__version__ = "0.1.0"

from injectcheck.application.reporters import ConsoleReporter
from injectcheck.application.services import AnalysisEngine
from injectcheck.domain.model import AnalysisConfig, AnalysisResult, Component, Dependency, Provider
from injectcheck.presentation.api.dsl import InjectCheck

__all__ = [
    "AnalysisConfig",
    "AnalysisEngine",
    "AnalysisResult",
    "Component",
    "ConsoleReporter",
    "Dependency",
    "InjectCheck",
    "Provider",
    "__version__",
]
