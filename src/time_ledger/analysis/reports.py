"""Report generation for time tracking data."""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from time_ledger.core.errors import InvalidDateError
from time_ledger.core.models import split_duration
from time_ledger.core.storage import TimeLogStore
from time_ledger.core.tracker import Clock, require_project, system_clock

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_since_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` calendar date.

    Raises:
        InvalidDateError: If ``value`` is not exactly that shape or not a real date
    """
    if not _DATE_PATTERN.match(value):
        raise InvalidDateError(value)
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidDateError(value) from e


def cutoff_timestamp(since: date) -> int:
    """Epoch seconds of local midnight at the start of ``since``."""
    return int(datetime.combine(since, time.min).timestamp())


@dataclass(frozen=True)
class ProjectReport:
    """Aggregated time for one project.

    Attributes:
        project: Project name
        count: Number of sessions counted
        total_seconds: Sum of session durations (running sessions count up to now)
        since: Date filter applied, if any
    """

    project: str
    count: int
    total_seconds: int
    since: Optional[date] = None

    @property
    def hours(self) -> int:
        return split_duration(self.total_seconds)[0]

    @property
    def minutes(self) -> int:
        return split_duration(self.total_seconds)[1]


class ReportAggregator:
    """Sum tracked time per project from the current log."""

    def __init__(self, store: Optional[TimeLogStore] = None, clock: Optional[Clock] = None):
        """Initialize report aggregator.

        Args:
            store: Time log store. Creates default if None.
            clock: Callable returning the current epoch seconds. Uses system time if None.
        """
        self.store = store or TimeLogStore()
        self.clock = clock or system_clock

    def report(self, project: Optional[str], since: Optional[str] = None) -> ProjectReport:
        """Count sessions and total time for ``project``.

        Args:
            project: Project name to report on
            since: Optional ``YYYY-MM-DD``; sessions starting before that day are skipped

        Returns:
            Report with session count and total seconds

        Raises:
            MissingArgumentError: If no project name is given
            InvalidDateError: If ``since`` is not a valid date
        """
        project = require_project(project, "report project1")

        since_date = parse_since_date(since) if since is not None else None
        cutoff = cutoff_timestamp(since_date) if since_date is not None else None

        entries = self.store.load()
        now = self.clock()

        count = 0
        total_seconds = 0
        for entry in entries:
            if entry.project != project:
                continue
            if cutoff is not None and entry.start < cutoff:
                continue

            count += 1
            total_seconds += max(0, entry.elapsed_seconds(now))

        logger.debug(f"Report for {project}: {count} sessions, {total_seconds}s")
        return ProjectReport(
            project=project,
            count=count,
            total_seconds=total_seconds,
            since=since_date,
        )
