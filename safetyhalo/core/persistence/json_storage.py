"""
Durable local key-value storage.

Each key is stored as one JSON document. Only the state store reads and
writes these records; to the rest of the system they are opaque.

Keys used by the application
----------------------------
- ``settings``:  ``{"alertsEnabled": bool, "confidenceThreshold": number}``
- ``event_log``: newest-first array of log entries
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

SETTINGS_KEY = "settings"
EVENT_LOG_KEY = "event_log"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(Exception):
    """Raised when a record cannot be read or written."""


class KeyValueStorage(Protocol):
    def read(self, key: str) -> Optional[Any]:
        """Return the decoded record, or None if it does not exist."""
        ...

    def write(self, key: str, value: Any) -> None:
        """Replace the record."""
        ...


class JsonFileStorage:
    """
    One ``<key>.json`` file per record inside a directory.

    Writes go to a temporary file in the same directory that then replaces the
    target, so a crash mid-write never leaves a truncated record behind.

    Parameters
    ----------
    directory
        Storage directory; created on first write.
    """

    def __init__(self, directory: str | os.PathLike):
        self._dir = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._dir / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        """
        Read and decode a record.

        Raises
        ------
        StorageError
            If the file exists but cannot be read or is not valid JSON.
        """
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {path}: {e!r}") from e

    def write(self, key: str, value: Any) -> None:
        """
        Encode and atomically replace a record.

        Raises
        ------
        StorageError
            If the directory or file cannot be written.
        """
        path = self._path(key)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self._dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, ensure_ascii=False, indent=2)
                os.replace(tmp, path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Cannot write {path}: {e!r}") from e


@dataclass
class MemoryStorage:
    """
    In-process storage with the same JSON round-trip semantics as files.

    Used for headless runs and tests.
    """

    records: Dict[str, str] = field(default_factory=dict)

    def read(self, key: str) -> Optional[Any]:
        raw = self.records.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt record {key!r}: {e!r}") from e

    def write(self, key: str, value: Any) -> None:
        try:
            self.records[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot encode record {key!r}: {e!r}") from e
