"""Dependency graph construction."""

from injectcheck.application.graph.builder import GraphBuilder
from injectcheck.application.graph.cache import ResolutionCache, TypeMatch

__all__ = ["GraphBuilder", "ResolutionCache", "TypeMatch"]
