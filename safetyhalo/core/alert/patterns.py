"""
Audible alert patterns per safety status.

- DANGER:  4 short high-pitched beeps (900 Hz, 150 ms, one every 200 ms)
- WARNING: 1 long low beep (440 Hz, 500 ms)
- SAFE:    silence
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from safetyhalo.domain.models import SafetyStatus

DANGER_FREQ_HZ = 900.0
DANGER_TONE_S = 0.15
DANGER_SPACING_S = 0.2
DANGER_COUNT = 4

WARNING_FREQ_HZ = 440.0
WARNING_TONE_S = 0.5


@dataclass(frozen=True)
class Tone:
    """
    One scheduled beep.

    Parameters
    ----------
    freq_hz
        Sine frequency.
    duration_s
        Length of the beep.
    offset_s
        Start time relative to the beginning of the pattern.
    """

    freq_hz: float
    duration_s: float
    offset_s: float


AlertPattern = Tuple[Tone, ...]


def pattern_for(status: SafetyStatus) -> AlertPattern:
    """
    Return the tone pattern for a status.

    Raises
    ------
    ValueError
        If the status is not a known member.
    """
    if status is SafetyStatus.DANGER:
        return tuple(
            Tone(DANGER_FREQ_HZ, DANGER_TONE_S, i * DANGER_SPACING_S) for i in range(DANGER_COUNT)
        )
    elif status is SafetyStatus.WARNING:
        return (Tone(WARNING_FREQ_HZ, WARNING_TONE_S, 0.0),)
    elif status is SafetyStatus.SAFE:
        return ()
    raise ValueError(f"Unhandled safety status: {status!r}")


def pattern_length_s(pattern: AlertPattern) -> float:
    """Total duration from first onset to last tone end."""
    return max((t.offset_s + t.duration_s for t in pattern), default=0.0)
