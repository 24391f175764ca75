"""Console rendering shared by the one-shot commands and the interactive shell."""

from datetime import datetime
from typing import Optional, Union

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from time_ledger.analysis.reports import ProjectReport
from time_ledger.core.models import TimeEntry, split_duration
from time_ledger.core.tracker import StopResult


def format_hm(seconds: int) -> str:
    """Format a second count as ``<H>h <M>m``."""
    hours, minutes = split_duration(seconds)
    return f"{hours}h {minutes}m"


def format_clock(timestamp: int, time_format: str = "%H:%M:%S") -> str:
    """Format an epoch timestamp as local wall-clock time."""
    return datetime.fromtimestamp(timestamp).strftime(time_format)


def print_started(console: Console, entry: TimeEntry, time_format: str = "%H:%M:%S") -> None:
    console.print(
        f'[green]✓[/green] Started tracking "{escape(entry.project)}" '
        f"at {format_clock(entry.start, time_format)}"
    )


def print_stopped(console: Console, result: StopResult) -> None:
    console.print(f'[green]✓[/green] Stopped tracking "{escape(result.entry.project)}".')
    console.print(
        f"  Session Duration: {result.hours}h {result.minutes}m ({result.duration_seconds}s)"
    )


def print_report(console: Console, report: ProjectReport, date_format: str = "%Y-%m-%d") -> None:
    """Print the optional filter notice and the framed report summary."""
    if report.since is not None:
        console.print(f"[dim]> Filtering: Showing logs after {report.since.strftime(date_format)}[/dim]")

    content = (
        f"Total Sessions: {report.count}\n"
        f"Total Time:     {format_hm(report.total_seconds)}"
    )
    panel = Panel(
        escape(content),
        title=f'Report for "{escape(report.project)}"',
        border_style="cyan",
        expand=False,
    )
    console.print(panel)


def print_active(
    console: Console,
    entries: list[TimeEntry],
    now: int,
    time_format: str = "%H:%M:%S",
) -> None:
    """Print running sessions as a table."""
    if not entries:
        console.print("[yellow]No task currently being tracked[/yellow]")
        return

    table = Table(title=f"Running Sessions ({len(entries)})")
    table.add_column("Project", style="bold")
    table.add_column("Started", style="cyan")
    table.add_column("Elapsed", style="magenta")

    for entry in entries:
        table.add_row(
            escape(entry.project),
            format_clock(entry.start, time_format),
            format_hm(max(0, entry.elapsed_seconds(now))),
        )

    console.print(table)


def print_error(console: Console, error: Union[Exception, str]) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")


def print_usage(console: Console, hint: Optional[str] = None) -> None:
    console.print(escape(hint or 'Unknown command. Try "start [project]"'))
