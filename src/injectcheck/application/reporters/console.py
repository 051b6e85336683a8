"""Console reporter: AnalysisResult → rich formatted string."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from injectcheck.application.reporters.strategies import ByTypeStrategy, GroupStrategy
from injectcheck.application.services.accuracy import AccuracyEstimator
from injectcheck.domain.model.enums import Severity

if TYPE_CHECKING:
    from injectcheck.domain.model.issue import Issue
    from injectcheck.domain.model.result import AnalysisResult


@dataclass(frozen=True, slots=True)
class ConsoleConfig:
    """Configuration for console reporter.

    Attributes:
        show_accuracy: Append the statistical accuracy report.
        show_cycles: List cycles and strongly connected components.
        max_issues: Max issues to display. None = unlimited.
        min_severity: Least severe level shown. None = all levels.
        group_by: Strategy for grouping issues. None = ByTypeStrategy().
    """

    show_accuracy: bool = True
    show_cycles: bool = True
    max_issues: int | None = None
    min_severity: Severity | None = None
    group_by: GroupStrategy | None = None

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.max_issues is not None and self.max_issues < 0:
            raise ValueError(f"max_issues must be non-negative, got {self.max_issues}")


class ConsoleReporter:
    """Console reporter: outputs rich formatted text.

    Output is str, not print(). Caller decides destination.
    """

    def __init__(self, config: ConsoleConfig | None = None) -> None:
        """Initialize reporter.

        Args:
            config: Reporter configuration. Uses defaults if None.
        """
        self._config = config or ConsoleConfig()
        self._estimator = AccuracyEstimator()

    def report(self, result: AnalysisResult) -> str:
        """Format analysis result as rich formatted string."""
        output = StringIO()
        console = Console(file=output, force_terminal=True, width=120)

        issues = self._filter_issues(result.issues)

        self._render_header(console, result)
        self._render_issues(console, issues)

        if self._config.show_cycles:
            self._render_cycles(console, result)

        if self._config.show_accuracy and result.accuracy_metrics.validation_enabled:
            self._render_accuracy(console, result)

        return output.getvalue()

    def _filter_issues(self, issues: tuple[Issue, ...]) -> tuple[Issue, ...]:
        """Filter issues by config. Only explicit config filters applied."""
        min_severity = self._config.min_severity
        if min_severity is not None:
            issues = tuple(i for i in issues if i.severity.rank <= min_severity.rank)
        if self._config.max_issues is not None:
            issues = issues[: self._config.max_issues]
        return issues

    def _render_header(self, console: Console, result: AnalysisResult) -> None:
        """Render header with summary line."""
        summary = result.summary()
        metadata = result.metadata

        console.print()
        console.rule(f"[bold]DEPENDENCY ANALYSIS: {escape(result.project_name)}[/bold]")
        console.print()

        console.print(
            f"[bold]Components:[/bold] {summary.total_components}  "
            f"[bold]Issues:[/bold] {summary.total_issues} "
            f"([red]errors: {summary.error_count}[/red], "
            f"[yellow]warnings: {summary.warning_count}[/yellow], "
            f"[cyan]info: {summary.info_count}[/cyan])"
        )
        console.print(
            f"[dim]Analysed in {metadata.analysis_time_ms:.1f} ms "
            f"(detection {metadata.detection_time_ms:.1f} ms, "
            f"validation {metadata.validation_time_ms:.1f} ms)[/dim]"
        )
        if metadata.used_fallback_detection:
            console.print("[yellow]Detector pipeline failed, basic detection was used[/yellow]")
        console.print()

    def _render_issues(self, console: Console, issues: tuple[Issue, ...]) -> None:
        """Render issues using configured strategy."""
        if not issues:
            console.print("[green]No dependency issues found[/green]")
            console.print()
            return

        strategy = self._config.group_by or ByTypeStrategy()
        strategy.render(console, strategy.group(issues))

    def _render_cycles(self, console: Console, result: AnalysisResult) -> None:
        """Render cycles and strongly connected components of the graph."""
        report = result.graph.cycle_report()
        if not report.has_cycles:
            return

        console.print(f"[bold]CYCLES[/bold] ({report.cycle_count})")
        for cycle in report.cycles:
            console.print(f"  {escape(cycle.display_path())}")
        for component in report.strongly_connected_components:
            console.print(f"  [dim]SCC:[/dim] {escape(', '.join(component))}")
        console.print()

    def _render_accuracy(self, console: Console, result: AnalysisResult) -> None:
        """Render the plain-text accuracy report verbatim."""
        text = self._estimator.generate_report(result.accuracy_metrics, len(result.issues))
        console.print(text, markup=False, highlight=False)
        console.print()
