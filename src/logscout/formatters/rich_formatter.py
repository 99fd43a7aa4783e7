"""Rich terminal formatter for logscout."""

import io
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..scanning.models import Ok, ReadError, ScanResult, ScanSummary, Severity, Skipped, TooLarge
from .base import BaseFormatter


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


def _outcome_label(result: ScanResult) -> str:
    outcome = result.outcome
    if isinstance(outcome, Ok):
        if outcome.error_count:
            return "[red]errors[/red]"
        if outcome.warning_count:
            return "[yellow]warnings[/yellow]"
        return "[green]clean[/green]"
    if isinstance(outcome, TooLarge):
        return f"[yellow]too large[/yellow] ({_format_size(outcome.size)})"
    if isinstance(outcome, Skipped):
        return f"[dim]skipped[/dim] ({escape(outcome.reason)})"
    if isinstance(outcome, ReadError):
        return f"[red]unreadable[/red] ({escape(outcome.cause)})"
    return ""


class RichFormatter(BaseFormatter):
    """Colorized statistics tree, plus a per-file table with --details."""

    def __init__(self, details: bool = False, console: Optional[Console] = None):
        super().__init__(details=details)
        self.console = console or Console()

    def render(self, summary: ScanSummary) -> None:
        self._print(self.console, summary)

    def format(self, summary: ScanSummary) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, no_color=True, width=120)
        self._print(console, summary)
        return buffer.getvalue()

    # ── Sections ───────────────────────────────────────────────

    def _print(self, console: Console, summary: ScanSummary) -> None:
        if self.details and summary.results:
            self._print_results(console, summary)
            self._print_matches(console, summary)
        self._print_root_errors(console, summary)
        self._print_statistics(console, summary)

    def _print_statistics(self, console: Console, summary: ScanSummary) -> None:
        tree = Tree("[bold cyan]Scan Statistics[/bold cyan]")
        tree.add(f"Scan time: [cyan]{summary.elapsed * 1000:.0f} ms[/cyan]")
        tree.add(f"Total files scanned: [green]{summary.files_scanned}[/green]")
        tree.add(f"Total errors found: [yellow]{summary.errors_found}[/yellow]")
        tree.add(f"Total warnings found: [yellow]{summary.warnings_found}[/yellow]")
        skipped = tree.add(f"Files skipped: [yellow]{summary.files_skipped}[/yellow]")
        if summary.read_errors:
            skipped.add(f"unreadable: {summary.read_errors}")
        if summary.binary_files:
            skipped.add(f"binary: {summary.binary_files}")
        tree.add(f"Large files encountered: [yellow]{summary.large_files}[/yellow]")
        console.print()
        console.print(tree)

    def _print_root_errors(self, console: Console, summary: ScanSummary) -> None:
        for error in summary.root_errors:
            console.print(
                f"[yellow]Skipped directory[/yellow] {escape(str(error.path))}: "
                f"{escape(error.reason)}"
            )

    def _print_results(self, console: Console, summary: ScanSummary) -> None:
        table = Table(title="Files", show_lines=False, header_style="bold cyan")
        table.add_column("#", justify="right", style="blue")
        table.add_column("File")
        table.add_column("Status")
        table.add_column("Errors", justify="right")
        table.add_column("Warnings", justify="right")
        table.add_column("Lines", justify="right")
        table.add_column("Time", justify="right", style="dim")

        for number, result in enumerate(summary.results, 1):
            outcome = result.outcome
            counts = ("", "", "")
            if isinstance(outcome, Ok):
                counts = (
                    str(outcome.error_count),
                    str(outcome.warning_count),
                    str(outcome.line_count),
                )
            table.add_row(
                f"{number:02d}",
                escape(str(result.path)),
                _outcome_label(result),
                *counts,
                f"{result.elapsed * 1000:.1f} ms",
            )
        console.print(table)

    def _print_matches(self, console: Console, summary: ScanSummary) -> None:
        for result in summary.results:
            outcome = result.outcome
            if not isinstance(outcome, Ok) or not outcome.matches:
                continue
            console.print()
            console.print(f"[bold]{escape(str(result.path))}[/bold]")
            for match in outcome.matches:
                style = "red" if match.severity is Severity.ERROR else "yellow"
                console.print(
                    f"  [blue]{match.line_number:>6}[/blue] [{style}]{escape(match.text)}[/{style}]"
                )
            hidden = outcome.error_count + outcome.warning_count - len(outcome.matches)
            if hidden > 0:
                console.print(f"  [dim]... {hidden} more[/dim]")

