"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from covmerge.models.coverage import CoverageReport, PackageCoverage

console = Console()

_PERFECT_RATE = 100.0
_GOOD_RATE = 80.0
_FAIR_RATE = 50.0


def _package_line_counts(package: PackageCoverage) -> tuple[int, int]:
    """Return (covered, valid) method line counts for *package*."""
    methods = [method for cls in package.classes for method in cls.methods]
    return (
        sum(method.lines_covered for method in methods),
        sum(method.lines_valid for method in methods),
    )


class CLIReporter:
    """Rich terminal output reporter for merge runs.

    Status lines are printed with ``soft_wrap`` so file paths are never
    folded across lines.
    """

    def __init__(self, output: Console | None = None) -> None:
        """Initialize the CLI reporter."""
        self.console = output or console

    def print_header(self, title: str) -> None:
        """Print a bold header."""
        self.console.print(f"\n[bold cyan]{escape(title)}[/bold cyan]\n")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {escape(message)}", soft_wrap=True)

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {escape(message)}", soft_wrap=True)

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", soft_wrap=True)

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{escape(message)}[/dim]", soft_wrap=True)

    def print_coverage_summary(self, report: CoverageReport) -> None:
        """Print a per-package line coverage table for a merged report."""
        table = Table(title="Merged Coverage", title_style="bold cyan")
        table.add_column("Package", style="bold")
        table.add_column("Classes", justify="right")
        table.add_column("Lines", justify="right")
        table.add_column("Line Coverage", justify="right")
        table.add_column("Complexity", justify="right")

        for package in report.packages:
            covered, valid = _package_line_counts(package)
            line_pct = package.metrics.line_rate * 100
            color = self._get_coverage_color(line_pct)
            table.add_row(
                escape(package.name) or "[dim](default)[/dim]",
                str(len(package.classes)),
                f"{covered}/{valid}",
                f"[{color}]{line_pct:.1f}%[/{color}]",
                str(package.metrics.complexity),
            )

        overall = report.metrics.line_rate * 100
        color = self._get_coverage_color(overall)
        table.add_section()
        table.add_row(
            "[bold]Overall[/bold]",
            str(sum(len(p.classes) for p in report.packages)),
            f"[bold]{report.lines_covered}/{report.lines_valid}[/bold]",
            f"[bold {color}]{overall:.1f}%[/bold {color}]",
            "",
        )

        self.console.print(table)

    def _get_coverage_color(self, percentage: float) -> str:
        """Return a Rich color for a coverage percentage."""
        if percentage >= _PERFECT_RATE:
            return "bright_green"
        if percentage >= _GOOD_RATE:
            return "green"
        if percentage >= _FAIR_RATE:
            return "yellow"
        return "red"


reporter = CLIReporter()
