"""Core functionality for time tracking."""

from time_ledger.core.errors import (
    CorruptStateError,
    InvalidDateError,
    MissingArgumentError,
    NoActiveSessionError,
    StorageWriteError,
    TimeLedgerError,
)
from time_ledger.core.models import TimeEntry
from time_ledger.core.storage import TimeLogStore
from time_ledger.core.tracker import StopResult, TimeTracker

__all__ = [
    "TimeEntry",
    "TimeLogStore",
    "TimeTracker",
    "StopResult",
    "TimeLedgerError",
    "MissingArgumentError",
    "NoActiveSessionError",
    "InvalidDateError",
    "CorruptStateError",
    "StorageWriteError",
]
