"""Infrastructure adapters for the domain ports."""

from injectcheck.infrastructure.component_source import StaticComponentSource
from injectcheck.infrastructure.source_reader import FileSourceReader

__all__ = ["FileSourceReader", "StaticComponentSource"]
