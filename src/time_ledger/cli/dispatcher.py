"""Line-oriented command dispatcher for the interactive shell.

Each line is split on whitespace into an action and positional arguments:

    start <project>
    stop <project>
    report <project> [since <YYYY-MM-DD>]
    status [project]
    exit

Errors from a command are printed and the shell keeps reading.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from rich.console import Console

from time_ledger.analysis.reports import ReportAggregator
from time_ledger.cli.output import (
    print_active,
    print_error,
    print_report,
    print_started,
    print_stopped,
    print_usage,
)
from time_ledger.core.errors import TimeLedgerError
from time_ledger.core.tracker import TimeTracker

logger = logging.getLogger(__name__)

EXIT_ACTIONS = ("exit",)


@dataclass(frozen=True)
class Command:
    """A parsed input line."""

    action: str
    args: list[str] = field(default_factory=list)

    @property
    def project(self) -> Optional[str]:
        return self.args[0] if self.args else None


def parse_command(line: str) -> Command:
    """Split a line into action and arguments. Blank input gives an empty action."""
    parts = line.split()
    if not parts:
        return Command(action="")
    return Command(action=parts[0], args=parts[1:])


def parse_since(args: list[str]) -> Optional[str]:
    """Pull the date out of ``<project> since <date>`` report arguments.

    Anything else after the project, including ``since`` with no date,
    means no filter.
    """
    if len(args) < 3 or args[1] != "since":
        return None
    return args[2]


class CommandDispatcher:
    """Route parsed commands to the tracker and report aggregator."""

    def __init__(
        self,
        tracker: TimeTracker,
        reports: ReportAggregator,
        console: Optional[Console] = None,
        time_format: str = "%H:%M:%S",
        date_format: str = "%Y-%m-%d",
    ):
        self.tracker = tracker
        self.reports = reports
        self.console = console or Console()
        self.time_format = time_format
        self.date_format = date_format
        self._handlers: dict[str, Callable[[Command], None]] = {
            "start": self._start,
            "stop": self._stop,
            "report": self._report,
            "status": self._status,
        }

    def dispatch(self, line: str) -> bool:
        """Run one line of input.

        Returns:
            False if the line asked to exit, True to keep reading
        """
        command = parse_command(line)

        if command.action in EXIT_ACTIONS:
            self.console.print("Goodbye!")
            return False

        handler = self._handlers.get(command.action)
        if handler is None:
            print_usage(self.console)
            return True

        try:
            handler(command)
        except TimeLedgerError as e:
            logger.debug(f"{command.action} failed: {e}")
            print_error(self.console, e)
        except OSError as e:
            logger.error(f"{command.action} failed reading the time log: {e}")
            print_error(self.console, e)

        return True

    def run(self, read_line: Callable[[str], str], prompt: str = "Freelancer CLI > ") -> None:
        """Read and dispatch lines until ``exit`` or end of input."""
        while True:
            try:
                line = read_line(prompt)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                self.console.print("Goodbye!")
                return

            if not self.dispatch(line.strip()):
                return

    def _start(self, command: Command) -> None:
        entry = self.tracker.start(command.project)
        print_started(self.console, entry, self.time_format)

    def _stop(self, command: Command) -> None:
        result = self.tracker.stop(command.project)
        print_stopped(self.console, result)

    def _report(self, command: Command) -> None:
        since = parse_since(command.args)
        report = self.reports.report(command.project, since)
        print_report(self.console, report, self.date_format)

    def _status(self, command: Command) -> None:
        entries = self.tracker.active_sessions(command.project)
        print_active(self.console, entries, self.tracker.clock(), self.time_format)
