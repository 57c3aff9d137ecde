from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List

from safetyhalo.domain.models import LogEntry

DEFAULT_LOG_CAPACITY = 100


@dataclass
class EventLogStore:
    """
    Bounded, newest-first history of evaluation outcomes.

    New entries are inserted at the head; once the capacity is exceeded the
    oldest entry (at the tail) is evicted.

    Notes
    -----
    - This store is intentionally simple and not thread-safe.
      Synchronization and persistence are handled by the enclosing `StateStore`.

    Attributes
    ----------
    capacity
        Maximum number of retained entries.
    """

    capacity: int = DEFAULT_LOG_CAPACITY
    _entries: Deque[LogEntry] = field(default_factory=deque, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {self.capacity}")

    def append(self, entry: LogEntry) -> None:
        """
        Insert an entry at the head, evicting the oldest one beyond capacity.

        Parameters
        ----------
        entry
            Entry to add.
        """
        self._entries.appendleft(entry)
        while len(self._entries) > self.capacity:
            self._entries.pop()

    def load(self, entries: Iterable[LogEntry]) -> None:
        """
        Replace the content with entries given newest-first.

        Entries beyond the capacity are dropped from the old end.
        """
        self._entries.clear()
        for entry in entries:
            if len(self._entries) >= self.capacity:
                break
            self._entries.append(entry)

    def all(self) -> List[LogEntry]:
        """
        Return a newest-first copy of the entries.
        """
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
