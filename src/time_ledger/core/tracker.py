"""Core time tracking engine."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from time_ledger.core.errors import MissingArgumentError, NoActiveSessionError
from time_ledger.core.models import TimeEntry, split_duration
from time_ledger.core.storage import TimeLogStore

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def system_clock() -> int:
    """Current wall-clock time in whole seconds since the epoch."""
    return int(time.time())


def require_project(project: Optional[str], example: str = "start project1") -> str:
    """Return the project name, or raise if it is blank.

    Raises:
        MissingArgumentError: If ``project`` is None or whitespace
    """
    if not project or not project.strip():
        raise MissingArgumentError(f"Please provide a project name. (e.g., '{example}')")
    return project.strip()


@dataclass(frozen=True)
class StopResult:
    """Outcome of stopping a session."""

    entry: TimeEntry
    duration_seconds: int

    @property
    def hours(self) -> int:
        return split_duration(self.duration_seconds)[0]

    @property
    def minutes(self) -> int:
        return split_duration(self.duration_seconds)[1]


class TimeTracker:
    """Starts and stops work sessions per project.

    Every operation loads the log fresh from the store and, if it changes
    anything, saves the whole log back before returning.
    """

    def __init__(self, store: Optional[TimeLogStore] = None, clock: Optional[Clock] = None):
        """Initialize time tracker.

        Args:
            store: Time log store. Creates default if None.
            clock: Callable returning the current epoch seconds. Uses system time if None.
        """
        self.store = store or TimeLogStore()
        self.clock = clock or system_clock

    def start(self, project: Optional[str]) -> TimeEntry:
        """Start tracking a new session for ``project``.

        An already running session for the same project is left alone, so
        starting twice yields two running sessions.

        Returns:
            Created entry

        Raises:
            MissingArgumentError: If no project name is given
        """
        project = require_project(project, "start project1")

        entries = self.store.load()
        entry = TimeEntry(project=project, start=self.clock())
        entries.append(entry)
        self.store.save(entries)

        logger.info(f"Started {project} at {entry.start}")
        return entry

    def stop(self, project: Optional[str]) -> StopResult:
        """Stop the first running session for ``project`` in stored order.

        Returns:
            The stopped entry and its duration

        Raises:
            MissingArgumentError: If no project name is given
            NoActiveSessionError: If the project has no running session
        """
        project = require_project(project, "stop project1")

        entries = self.store.load()
        index = self._find_active_index(entries, project)
        if index is None:
            raise NoActiveSessionError(project)

        current = entries[index]
        now = self.clock()
        if now < current.start:
            logger.warning(
                f"Clock is behind the start of {project} ({now} < {current.start}); "
                f"recording a zero-length session"
            )
            now = current.start

        entries[index] = current.close(now)
        self.store.save(entries)

        stopped = entries[index]
        duration = stopped.elapsed_seconds(now)
        logger.info(f"Stopped {project} after {duration}s")
        return StopResult(entry=stopped, duration_seconds=duration)

    def active_sessions(self, project: Optional[str] = None) -> list[TimeEntry]:
        """List running sessions, optionally for a single project."""
        return [
            e
            for e in self.store.load()
            if e.is_running and (project is None or e.project == project)
        ]

    @staticmethod
    def _find_active_index(entries: list[TimeEntry], project: str) -> Optional[int]:
        for i, entry in enumerate(entries):
            if entry.project == project and entry.is_running:
                return i
        return None
