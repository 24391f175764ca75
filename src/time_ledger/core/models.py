"""Core data models for time tracking."""

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class TimeEntry:
    """One recorded or in-progress work session.

    Attributes:
        project: Project name the time is booked against
        start: Start of the session, in whole seconds since the epoch
        end: End of the session in seconds since the epoch (None while running)
    """

    project: str
    start: int
    end: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.project:
            raise ValueError("project must not be empty")
        if self.end is not None and self.end < self.start:
            raise ValueError(f"end ({self.end}) is before start ({self.start})")

    @property
    def is_running(self) -> bool:
        """Check if this session is still being tracked."""
        return self.end is None

    @property
    def duration_seconds(self) -> Optional[int]:
        """Calculate duration in seconds. Returns None if the session is ongoing."""
        if self.end is None:
            return None
        return self.end - self.start

    def elapsed_seconds(self, now: int) -> int:
        """Duration so far, counting a running session as if it stopped at ``now``."""
        end = self.end if self.end is not None else now
        return end - self.start

    def close(self, end: int) -> "TimeEntry":
        """Return a copy of this entry stopped at ``end``.

        Raises:
            ValueError: If the entry is already stopped or ``end`` precedes ``start``
        """
        if self.end is not None:
            raise ValueError(f'Session for "{self.project}" is already stopped')
        return replace(self, end=end)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "project": self.project,
            "start": self.start,
            "end": self.end,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeEntry":
        """Create TimeEntry from dictionary (JSON deserialization)."""
        return cls(
            project=data["project"],
            start=int(data["start"]),
            end=int(data["end"]) if data.get("end") is not None else None,
        )


def split_duration(seconds: int) -> tuple[int, int]:
    """Break a second count into whole hours and remaining whole minutes."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return hours, minutes
