from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from safetyhalo.audio.tone_sink import ToneSink
from safetyhalo.core.alert.patterns import pattern_for
from safetyhalo.domain.models import SafetyStatus

log = logging.getLogger(__name__)


@dataclass
class AlertDispatcher:
    """
    Map a safety status to an audible pattern and hand it to the tone sink.

    Notes
    -----
    - The alerts-enabled flag is read through a provider at every dispatch.
    - Disabled alerts and SAFE statuses are handled without touching the sink.
    - The sink schedules playback and returns immediately; the dispatcher
      never waits for a pattern to finish.
    - Audio failures are logged and swallowed: alerting is a side channel to
      the event log, which is the authoritative record.

    Parameters
    ----------
    alerts_enabled
        Callable returning the current alerts-enabled setting.
    sink
        Platform audio facility.
    """

    alerts_enabled: Callable[[], bool]
    sink: ToneSink

    def dispatch(self, status: SafetyStatus) -> bool:
        """
        Play the alert pattern for a status.

        Parameters
        ----------
        status
            Status of the current report.

        Returns
        -------
        bool
            True when the status was handled (including the silent cases),
            False when the audio sink failed.
        """
        if not self.alerts_enabled():
            log.debug("Alerts disabled, skipping %s pattern", status.value)
            return True

        pattern = pattern_for(status)
        if not pattern:
            return True

        try:
            self.sink.play(pattern)
        except Exception as e:
            log.warning("Alert sink failed for %s: %r", status.value, e)
            return False
        return True
