"""Errors raised by the time ledger core.

Every error carries a one-line, human-readable message. The command
layer prints it and keeps going.
"""

from pathlib import Path
from typing import Optional


class TimeLedgerError(Exception):
    """Base class for all time ledger errors."""

    pass


class MissingArgumentError(TimeLedgerError):
    """A required argument (usually the project name) was not given."""

    def __init__(self, message: str = "Please provide a project name.") -> None:
        super().__init__(message)


class NoActiveSessionError(TimeLedgerError):
    """Stop was requested for a project with nothing running."""

    def __init__(self, project: str) -> None:
        self.project = project
        super().__init__(f'No active timer found for "{project}".')


class InvalidDateError(TimeLedgerError):
    """A since-date did not parse as a YYYY-MM-DD calendar date."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid date format: {value!r}. Try YYYY-MM-DD.")


class CorruptStateError(TimeLedgerError):
    """The persisted log exists but is not a valid list of time entries."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Time log {path} is corrupted: {reason}")


class StorageWriteError(TimeLedgerError):
    """Writing the time log to disk failed."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to write time log {path}{detail}")
