"""JSON storage for the time log with atomic whole-file writes."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Sequence

from jsonschema import ValidationError, validate  # type: ignore[import-untyped]

from time_ledger.core.errors import CorruptStateError, StorageWriteError
from time_ledger.core.models import TimeEntry

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path.home() / ".time-ledger" / "data.json"


class TimeLogStore:
    """Loads and replaces the full time log stored in a single JSON file.

    The log is a JSON array of ``{"project", "start", "end"}`` records. A
    missing or empty file reads as an empty log. Every save rewrites the
    whole file; there is no locking and the last writer wins.
    """

    LOG_SCHEMA = {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "project": {"type": "string", "minLength": 1},
                "start": {"type": "integer"},
                "end": {"type": ["integer", "null"]},
            },
            "required": ["project", "start", "end"],
            "additionalProperties": False,
        },
    }

    def __init__(self, data_file: Optional[Path] = None, indent: int = 2):
        """Initialize the store.

        Args:
            data_file: Path of the JSON log. Defaults to ~/.time-ledger/data.json
            indent: Indentation used when pretty-printing the log
        """
        self.data_file = Path(data_file) if data_file is not None else DEFAULT_DATA_FILE
        self.indent = indent

    def load(self) -> list[TimeEntry]:
        """Load the full log in stored order.

        Returns:
            List of entries (empty if the file is missing or blank)

        Raises:
            CorruptStateError: If the file has content that is not a valid log
        """
        if not self.data_file.exists():
            logger.debug(f"No time log at {self.data_file}, starting empty")
            return []

        with open(self.data_file, "rb") as f:
            raw = f.read()

        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptStateError(self.data_file, f"not valid UTF-8 ({e})") from e

        if not content.strip():
            return []

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise CorruptStateError(self.data_file, f"invalid JSON ({e})") from e

        return self._parse(data)

    def _parse(self, data: Any) -> list[TimeEntry]:
        """Validate decoded JSON and convert it to entries."""
        try:
            validate(instance=data, schema=self.LOG_SCHEMA)
        except ValidationError as e:
            raise CorruptStateError(self.data_file, e.message) from e

        entries = []
        for index, record in enumerate(data):
            try:
                entries.append(TimeEntry.from_dict(record))
            except ValueError as e:
                raise CorruptStateError(self.data_file, f"entry {index}: {e}") from e

        logger.debug(f"Loaded {len(entries)} entries from {self.data_file}")
        return entries

    def save(self, entries: Sequence[TimeEntry]) -> None:
        """Replace the persisted log with ``entries``.

        Writes to a temporary file and renames it over the target.

        Raises:
            StorageWriteError: If the file cannot be written
        """
        temp_file = self.data_file.with_name(self.data_file.name + ".tmp")
        payload = [entry.to_dict() for entry in entries]

        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=self.indent, ensure_ascii=False)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())

            temp_file.replace(self.data_file)

        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            logger.error(f"Failed to save time log: {e}")
            raise StorageWriteError(self.data_file, e) from e

        logger.debug(f"Saved {len(payload)} entries to {self.data_file}")
