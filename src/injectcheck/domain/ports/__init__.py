"""Domain ports (protocols)."""

from injectcheck.domain.ports.detector import DetectorProtocol
from injectcheck.domain.ports.progress import ProgressProtocol
from injectcheck.domain.ports.reporter import ReporterProtocol
from injectcheck.domain.ports.source import ComponentSourceProtocol, SourceReaderProtocol
from injectcheck.domain.ports.type_oracle import SupertypeOracle

__all__ = [
    "ComponentSourceProtocol",
    "DetectorProtocol",
    "ProgressProtocol",
    "ReporterProtocol",
    "SourceReaderProtocol",
    "SupertypeOracle",
]
