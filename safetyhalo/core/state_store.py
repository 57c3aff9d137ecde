from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import List, Optional

from safetyhalo.core.persistence.json_storage import (
    EVENT_LOG_KEY,
    SETTINGS_KEY,
    KeyValueStorage,
    MemoryStorage,
    StorageError,
)
from safetyhalo.core.state.event_log import EventLogStore
from safetyhalo.core.state.trend_buffer import TrendBuffer
from safetyhalo.domain.events import EvaluationEvent
from safetyhalo.domain.models import LogEntry, SensorData, Settings, TrendPoint

log = logging.getLogger(__name__)


@dataclass
class StateStore:
    """
    Thread-safe owner of all shared application state.

    'StateStore' aggregates and coordinates access to:
    - user settings (alerts flag, confidence threshold), persisted
    - the bounded event log, persisted
    - the trend buffer (memory only)
    - the latest sensor snapshot and latest evaluation (memory only)

    Concurrency Model
    -----------------
    All reads/writes are guarded by a single re-entrant lock
    (`threading.RLock`). Every mutation of settings or of the event log is
    paired with its storage write while the lock is held, so the durable copy
    never drifts from memory and concurrent writers cannot interleave.

    Persistence Policy
    ------------------
    - `load()` rehydrates once at startup. Missing or corrupt records are
      replaced by defaults (empty log, default settings); never fatal.
    - A failed write is logged and the in-memory change is kept; the next
      mutation writes the full state again.

    Attributes
    ----------
    storage
        Durable key-value storage.
    event_log
        Bounded event history.
    trend
        Trend buffer for the live chart.
    """

    storage: KeyValueStorage = field(default_factory=MemoryStorage)
    event_log: EventLogStore = field(default_factory=EventLogStore)
    trend: TrendBuffer = field(default_factory=TrendBuffer)

    _settings: Settings = field(default_factory=Settings, init=False, repr=False)
    _latest_sensors: Optional[SensorData] = field(default=None, init=False, repr=False)
    _latest_evaluation: Optional[EvaluationEvent] = field(default=None, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    # --- Startup ---
    def load(self) -> None:
        """
        Rehydrate settings and event log from storage.
        """
        with self._lock:
            self._settings = self._load_settings()
            self.event_log.load(self._load_log())

    def _load_settings(self) -> Settings:
        try:
            raw = self.storage.read(SETTINGS_KEY)
        except StorageError as e:
            log.warning("Stored settings unreadable, using defaults: %s", e)
            return Settings()
        if raw is None:
            return Settings()
        return Settings.from_dict(raw)

    def _load_log(self) -> List[LogEntry]:
        try:
            raw = self.storage.read(EVENT_LOG_KEY)
        except StorageError as e:
            log.warning("Stored event log unreadable, starting empty: %s", e)
            return []
        if raw is None:
            return []
        if not isinstance(raw, list):
            log.warning("Stored event log is not a list, starting empty")
            return []
        try:
            return [LogEntry.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            log.warning("Stored event log is corrupt, starting empty: %r", e)
            return []

    def _write(self, key: str, value: object) -> None:
        try:
            self.storage.write(key, value)
        except StorageError as e:
            log.warning("Persisting %s failed: %s", key, e)

    # --- Settings API ---
    @property
    def settings(self) -> Settings:
        with self._lock:
            return self._settings

    def threshold(self) -> float:
        with self._lock:
            return self._settings.confidence_threshold

    def alerts_enabled(self) -> bool:
        with self._lock:
            return self._settings.alerts_enabled

    def set_threshold(self, value: float) -> None:
        """
        Update the confidence threshold and persist settings.

        Parameters
        ----------
        value
            New threshold in [0, 1].

        Raises
        ------
        ValueError
            If the value lies outside [0, 1].
        """
        value = float(value)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"Threshold must be within [0, 1], got {value!r}")
        with self._lock:
            self._settings = replace(self._settings, confidence_threshold=value)
            self._write(SETTINGS_KEY, self._settings.to_dict())

    def set_alerts_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._settings = replace(self._settings, alerts_enabled=bool(enabled))
            self._write(SETTINGS_KEY, self._settings.to_dict())

    # --- Event log API ---
    def append_log(self, entry: LogEntry) -> None:
        """
        Insert an entry at the head of the log and persist the log.
        """
        with self._lock:
            self.event_log.append(entry)
            self._write(EVENT_LOG_KEY, [e.to_dict() for e in self.event_log.all()])

    def clear_log(self) -> None:
        """
        Empty the log and its durable copy.

        Notes
        -----
        Triggered only by explicit user action (e.g., "Clear log").
        """
        with self._lock:
            self.event_log.clear()
            self._write(EVENT_LOG_KEY, [])

    @property
    def log_entries(self) -> List[LogEntry]:
        """
        Snapshot copy of the log, newest first.
        """
        with self._lock:
            return self.event_log.all()

    # --- Sensors / trend API ---
    def update_sensors(self, sensors: SensorData) -> None:
        with self._lock:
            self._latest_sensors = sensors

    @property
    def latest_sensors(self) -> Optional[SensorData]:
        with self._lock:
            return self._latest_sensors

    def append_trend(self, point: TrendPoint) -> None:
        with self._lock:
            self.trend.append(point)

    @property
    def trend_points(self) -> List[TrendPoint]:
        """
        Snapshot copy of the trend buffer, oldest first.
        """
        with self._lock:
            return self.trend.points()

    # --- Evaluation API ---
    def set_latest_evaluation(self, event: EvaluationEvent) -> None:
        with self._lock:
            self._latest_evaluation = event

    @property
    def latest_evaluation(self) -> Optional[EvaluationEvent]:
        with self._lock:
            return self._latest_evaluation
