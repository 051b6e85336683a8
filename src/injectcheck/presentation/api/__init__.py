"""Fluent API for dependency-injection checks.

Public exports:
    InjectCheck: Entry point for fluent DSL
    IssueQuery: Issue query and assertion builder
"""

from injectcheck.presentation.api.dsl import InjectCheck, IssueQuery

__all__ = ["InjectCheck", "IssueQuery"]
