from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, List, Optional

from safetyhalo.domain.models import SensorData, TrendPoint

DEFAULT_TREND_POINTS = 20

# Visualization jitter, not measurement noise.
TEMP_JITTER = 0.5
GAS_JITTER_PCT = 5.0
NOISE_JITTER_PCT = 10.0


def sample_trend_point(
    sensors: SensorData,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> TrendPoint:
    """
    Sample one chart point from the current sensor snapshot.

    Parameters
    ----------
    sensors
        Latest sensor snapshot.
    now
        Wall-clock time for the label. If None, uses `datetime.now()`.
    rng
        Random source for the jitter (module `random` if None).

    Returns
    -------
    TrendPoint
        Temperature +/- 0.5, gas and noise as percentages plus a small
        positive jitter (up to 5 and 10 points).
    """
    r = rng or random
    ts = now or datetime.now()
    return TrendPoint(
        time=ts.strftime("%H:%M:%S"),
        temp=sensors.avg_temperature_c + r.uniform(-TEMP_JITTER, TEMP_JITTER),
        gas=sensors.gas_level * 100 + r.uniform(0.0, GAS_JITTER_PCT),
        noise=sensors.noise_level * 100 + r.uniform(0.0, NOISE_JITTER_PCT),
    )


@dataclass
class TrendBuffer:
    """
    Sliding window of the most recent trend points.

    Notes
    -----
    - Oldest points are evicted first once `max_points` is exceeded.
    - Not persisted; resets on restart.
    - Not thread-safe; the enclosing `StateStore` serializes access.
    """

    max_points: int = DEFAULT_TREND_POINTS
    _points: Deque[TrendPoint] = field(default_factory=deque, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_points < 1:
            raise ValueError(f"max_points must be >= 1, got {self.max_points}")
        self._points = deque(maxlen=self.max_points)

    def append(self, point: TrendPoint) -> None:
        self._points.append(point)

    def points(self) -> List[TrendPoint]:
        """
        Return an oldest-first copy of the buffered points.
        """
        return list(self._points)

    def clear(self) -> None:
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)
