"""Group strategies for the console reporter.

GroupStrategy Protocol defines how issues are grouped and rendered.
Built-in strategies: ByTypeStrategy, ByComponentStrategy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from rich.markup import escape
from rich.table import Table

from injectcheck.domain.model.enums import IssueType, Severity

if TYPE_CHECKING:
    from rich.console import Console

    from injectcheck.domain.model.issue import Issue

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


class GroupStrategy(Protocol):
    """Protocol for issue grouping and rendering."""

    def group(self, issues: tuple[Issue, ...]) -> dict[str, list[Issue]]:
        """Group issues by strategy-specific key."""
        ...

    def render(self, console: Console, grouped: dict[str, list[Issue]]) -> None:
        """Render grouped issues to console."""
        ...


def format_confidence(issue: Issue) -> str:
    """Confidence as a percentage."""
    return f"{issue.confidence_score * 100:.0f}%"


def _issue_table(first_column: str, *, show_fixes: bool) -> Table:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Severity")
    table.add_column(first_column, style="cyan")
    table.add_column("Message")
    table.add_column("Confidence", style="dim", justify="right")
    if show_fixes:
        table.add_column("Fix", style="green")
    return table


def _add_issue_row(table: Table, first_cell: str, issue: Issue, *, show_fixes: bool) -> None:
    """Severity is the only markup; issue text is escaped."""
    style = SEVERITY_STYLES[issue.severity]
    row = [
        f"[{style}]{issue.severity.name}[/{style}]",
        escape(first_cell),
        escape(issue.message),
        format_confidence(issue),
    ]
    if show_fixes:
        row.append(escape(issue.suggested_fix) if issue.suggested_fix else "-")
    table.add_row(*row)


@dataclass(frozen=True, slots=True)
class ByTypeStrategy:
    """Group issues by IssueType, in taxonomy order.

    Attributes:
        show_fixes: Show suggested fixes.
    """

    show_fixes: bool = True

    def group(self, issues: tuple[Issue, ...]) -> dict[str, list[Issue]]:
        """Group issues by type name."""
        by_type: dict[str, list[Issue]] = {}
        for issue in issues:
            by_type.setdefault(issue.type.name, []).append(issue)
        return by_type

    def render(self, console: Console, grouped: dict[str, list[Issue]]) -> None:
        """One table per issue type."""
        for issue_type in IssueType:
            issues = grouped.get(issue_type.name, [])
            if not issues:
                continue

            console.print(f"[bold]{issue_type.name}[/bold] ({len(issues)})")
            table = _issue_table("Component", show_fixes=self.show_fixes)
            for issue in issues:
                _add_issue_row(table, issue.component_name, issue, show_fixes=self.show_fixes)
            console.print(table)
            console.print()


@dataclass(frozen=True, slots=True)
class ByComponentStrategy:
    """Group issues by affected component.

    An issue implicating several components appears under each of them.

    Attributes:
        show_fixes: Show suggested fixes.
    """

    show_fixes: bool = False

    def group(self, issues: tuple[Issue, ...]) -> dict[str, list[Issue]]:
        """Group issues by component name."""
        by_component: dict[str, list[Issue]] = {}
        for issue in issues:
            for name in issue.affected_components():
                by_component.setdefault(name, []).append(issue)
        return by_component

    def render(self, console: Console, grouped: dict[str, list[Issue]]) -> None:
        """One table per component, sorted by name."""
        for component in sorted(grouped):
            issues = grouped[component]
            console.print(f"[bold]{escape(component)}[/bold] ({len(issues)})")
            table = _issue_table("Type", show_fixes=self.show_fixes)
            for issue in issues:
                _add_issue_row(table, issue.type.name, issue, show_fixes=self.show_fixes)
            console.print(table)
            console.print()
