from __future__ import annotations

import logging
from typing import Protocol

from safetyhalo.core.alert.patterns import AlertPattern

log = logging.getLogger(__name__)


class ToneSink(Protocol):
    """
    Protocol interface for the platform audio facility.

    `play` must return immediately: the pattern is scheduled and played in
    the background. Implementations may raise on device failure; the alert
    dispatcher swallows and logs such errors.
    """

    def play(self, pattern: AlertPattern) -> None:
        """
        Schedule a tone pattern for playback.

        Parameters
        ----------
        pattern
            Tones to play. May be empty.
        """
        ...


class NullToneSink:
    """
    Sink for headless runs: logs the pattern instead of playing it.
    """

    def play(self, pattern: AlertPattern) -> None:
        if pattern:
            log.info(
                "Alert pattern (no audio device): %s",
                ", ".join(f"{t.freq_hz:.0f}Hz/{t.duration_s * 1000:.0f}ms@{t.offset_s:.2f}s" for t in pattern),
            )
