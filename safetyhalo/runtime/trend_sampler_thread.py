from __future__ import annotations

import logging
import random
import threading
from datetime import datetime
from typing import Optional

from safetyhalo.core.state.trend_buffer import sample_trend_point
from safetyhalo.core.state_store import StateStore

log = logging.getLogger(__name__)

DEFAULT_TREND_INTERVAL_S = 3.0


class TrendSamplerThread:
    """
    Periodic task feeding the trend buffer from the latest sensor snapshot.

    Concurrency Model
    -----------------
    - Independent of the evaluation worker: it only reads the latest sensor
      snapshot from the `StateStore` and appends to the trend buffer, so it
      keeps ticking while an oracle call is in flight.
    - Sleeps on the stop event so `stop()` takes effect immediately.
    - Ticks with no sensor snapshot yet are skipped.

    Parameters
    ----------
    store
        State owner providing the snapshot and receiving points.
    stop_event
        Thread stop signal.
    interval_s
        Seconds between samples.
    rng
        Random source for the jitter.
    """

    def __init__(
        self,
        store: StateStore,
        stop_event: threading.Event,
        interval_s: float = DEFAULT_TREND_INTERVAL_S,
        rng: Optional[random.Random] = None,
    ):
        if interval_s <= 0:
            raise ValueError(f"interval_s must be > 0, got {interval_s}")
        self._store = store
        self._stop = stop_event
        self._interval_s = interval_s
        self._rng = rng or random.Random()
        self._thread = threading.Thread(target=self._run, name="trend-sampler", daemon=True)

    def start(self) -> None:
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = 2.0) -> None:
        self._thread.join(timeout=timeout)

    def tick(self, now: Optional[datetime] = None) -> bool:
        """
        Take one sample.

        Returns
        -------
        bool
            True if a point was appended.
        """
        sensors = self._store.latest_sensors
        if sensors is None:
            return False
        self._store.append_trend(sample_trend_point(sensors, now=now, rng=self._rng))
        return True

    def _run(self) -> None:
        while not self._stop.wait(self._interval_s):
            try:
                self.tick()
            except Exception:
                log.exception("Trend sample failed")
