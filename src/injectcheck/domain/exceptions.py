"""Domain exceptions: all public errors of injectcheck.

Every exception a caller can see is defined here. Application and
infrastructure layers raise these instead of defining their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from injectcheck.domain.model.issue import Issue


class InjectCheckError(Exception):
    """Base for all injectcheck error exceptions.

    Allows: except InjectCheckError to catch all library errors.
    """


# N818: Signals are NOT errors, hence no "Error" suffix.
class InjectCheckSignal(Exception):  # noqa: N818
    """Base for all injectcheck signal exceptions (flow control, not errors)."""


class AnalysisAlreadyRunningError(InjectCheckError, RuntimeError):
    """Analysis already in flight on this engine, cannot start another.

    Inherits RuntimeError for semantic correctness (invalid state).
    """

    def __init__(self) -> None:
        """Initialize with fixed message."""
        super().__init__("Analysis is already running")


class NotDIProjectError(InjectCheckError, LookupError):
    """Project is not a recognized dependency-injection project.

    Attributes:
        project_name: Name of the rejected project.
    """

    def __init__(self, project_name: str) -> None:
        """Initialize with project name."""
        self.project_name = project_name
        super().__init__(f"Project '{project_name}' is not a recognized DI project")


class DependencyIssuesError(InjectCheckError, AssertionError):
    """Analysis found issues at or above the requested severity.

    Inherits AssertionError so test frameworks report it as a failure.

    Attributes:
        issues: Issues that caused the failure.
    """

    def __init__(self, issues: tuple[Issue, ...]) -> None:
        """Initialize with offending issues."""
        self.issues = issues
        lines = [f"Found {len(issues)} dependency issue(s):"]
        lines.extend(f"  [{i.severity.name}] {i.type.name}: {i.message}" for i in issues)
        super().__init__("\n".join(lines))


class AnalysisCancelled(InjectCheckSignal):
    """Signal raised between phases when the caller requested cancellation.

    NOT an error: the caller asked for it.

    Attributes:
        phase: Name of the phase that was about to start.
    """

    def __init__(self, phase: str) -> None:
        """Initialize with the phase name."""
        self.phase = phase
        super().__init__(f"Analysis cancelled before {phase}")
