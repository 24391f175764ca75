"""Main CLI application."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from time_ledger import __version__
from time_ledger.analysis.reports import ReportAggregator
from time_ledger.cli.config_commands import config
from time_ledger.cli.dispatcher import CommandDispatcher
from time_ledger.cli.output import (
    print_active,
    print_error,
    print_report,
    print_started,
    print_stopped,
)
from time_ledger.core.config import ConfigManager
from time_ledger.core.errors import CorruptStateError, TimeLedgerError
from time_ledger.core.storage import TimeLogStore
from time_ledger.core.tracker import TimeTracker

console = Console()
error_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """Attach a single handler to the package logger."""
    package_logger = logging.getLogger("time_ledger")
    package_logger.setLevel(getattr(logging, level, logging.WARNING))

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(Path(log_file).expanduser())
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)


def read_line(prompt: str) -> str:
    """Read one shell line, mapping click's abort on EOF or Ctrl-C back to EOFError."""
    try:
        return click.prompt(prompt, default="", show_default=False, prompt_suffix="")
    except click.Abort:
        raise EOFError from None


def get_config(ctx: click.Context) -> ConfigManager:
    """Load the configuration selected on the command line."""
    config_path = ctx.obj.get("config_path")
    try:
        return ConfigManager(Path(config_path) if config_path else None)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def get_store(ctx: click.Context, config_mgr: ConfigManager) -> TimeLogStore:
    """Build the time log store, preferring --data-file over the config."""
    data_file = ctx.obj.get("data_file")
    path = Path(data_file).expanduser() if data_file else config_mgr.data_file
    return TimeLogStore(path, indent=config_mgr.get("storage.indent", 2))


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option("--data-file", help="Custom time log file", type=click.Path(dir_okay=False))
@click.option("--config", "config_path", help="Custom config file", type=click.Path(dir_okay=False))
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(
    ctx: click.Context,
    data_file: Optional[str],
    config_path: Optional[str],
    no_color: bool,
) -> None:
    """Time Ledger - track time per project and report totals.

    Run without a command to open the interactive shell.
    """
    ctx.ensure_object(dict)
    ctx.obj["data_file"] = data_file
    ctx.obj["config_path"] = config_path

    if no_color:
        console.no_color = True
        error_console.no_color = True

    config_mgr = get_config(ctx)
    ctx.obj["config"] = config_mgr
    setup_logging(
        config_mgr.get("advanced.log_level", "WARNING"),
        config_mgr.get("advanced.log_file"),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@cli.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Open the interactive shell.

    Commands:
        start <project>
        stop <project>
        report <project> [since YYYY-MM-DD]
        status [project]
        exit
    """
    config_mgr: ConfigManager = ctx.obj["config"]
    store = get_store(ctx, config_mgr)

    # A log that cannot be read at startup ends the session
    try:
        store.load()
    except (CorruptStateError, OSError) as e:
        print_error(error_console, e)
        sys.exit(1)

    dispatcher = CommandDispatcher(
        TimeTracker(store),
        ReportAggregator(store),
        console=console,
        time_format=config_mgr.get("general.time_format", "%H:%M:%S"),
        date_format=config_mgr.get("general.date_format", "%Y-%m-%d"),
    )

    banner = config_mgr.get("shell.banner")
    if banner:
        console.print(f"[bold]{escape(banner)}[/bold]", highlight=False)

    prompt = config_mgr.get("shell.prompt", "Freelancer CLI > ")
    dispatcher.run(read_line, prompt)


@cli.command()
@click.argument("project")
@click.pass_context
def start(ctx: click.Context, project: str) -> None:
    """Start tracking a project.

    Example:
        time-ledger start client-site
    """
    config_mgr: ConfigManager = ctx.obj["config"]
    tracker = TimeTracker(get_store(ctx, config_mgr))

    try:
        entry = tracker.start(project)
        print_started(console, entry, config_mgr.get("general.time_format", "%H:%M:%S"))
    except (TimeLedgerError, OSError) as e:
        print_error(error_console, e)
        sys.exit(1)


@cli.command()
@click.argument("project")
@click.pass_context
def stop(ctx: click.Context, project: str) -> None:
    """Stop the running session of a project.

    Example:
        time-ledger stop client-site
    """
    config_mgr: ConfigManager = ctx.obj["config"]
    tracker = TimeTracker(get_store(ctx, config_mgr))

    try:
        result = tracker.stop(project)
        print_stopped(console, result)
    except (TimeLedgerError, OSError) as e:
        print_error(error_console, e)
        sys.exit(1)


@cli.command()
@click.argument("project")
@click.option("--since", help="Only count sessions starting on or after this date (YYYY-MM-DD)")
@click.pass_context
def report(ctx: click.Context, project: str, since: Optional[str]) -> None:
    """Show session count and total time for a project.

    Examples:
        time-ledger report client-site
        time-ledger report client-site --since 2025-01-01
    """
    config_mgr: ConfigManager = ctx.obj["config"]
    aggregator = ReportAggregator(get_store(ctx, config_mgr))

    try:
        result = aggregator.report(project, since)
        print_report(console, result, config_mgr.get("general.date_format", "%Y-%m-%d"))
    except (TimeLedgerError, OSError) as e:
        print_error(error_console, e)
        sys.exit(1)


@cli.command()
@click.argument("project", required=False)
@click.pass_context
def status(ctx: click.Context, project: Optional[str]) -> None:
    """Show running sessions.

    Example:
        time-ledger status
        time-ledger status client-site
    """
    config_mgr: ConfigManager = ctx.obj["config"]
    tracker = TimeTracker(get_store(ctx, config_mgr))

    try:
        entries = tracker.active_sessions(project)
    except (TimeLedgerError, OSError) as e:
        print_error(error_console, e)
        sys.exit(1)

    print_active(console, entries, tracker.clock(), config_mgr.get("general.time_format", "%H:%M:%S"))


cli.add_command(config)


if __name__ == "__main__":
    cli(obj={})
