"""
PCM rendering of alert patterns.

Each tone is a sine wave whose gain starts at `PEAK_GAIN` and decays
exponentially to `FLOOR_GAIN` by the end of the tone. Output is signed
16-bit little-endian mono.
"""

from __future__ import annotations

import math
import sys
from array import array

from safetyhalo.core.alert.patterns import AlertPattern, pattern_length_s

DEFAULT_SAMPLE_RATE = 44100
PEAK_GAIN = 0.1
FLOOR_GAIN = 0.0001
_INT16_MAX = 32767


def render_pattern(
    pattern: AlertPattern,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    volume: float = 1.0,
) -> bytes:
    """
    Render a tone pattern into raw PCM bytes.

    Parameters
    ----------
    pattern
        Tones to render; gaps between onsets are silence.
    sample_rate
        Samples per second.
    volume
        Extra linear gain applied on top of the envelope (0-1).

    Returns
    -------
    bytes
        PCM data (int16 LE mono). Empty for an empty pattern.
    """
    total = int(round(pattern_length_s(pattern) * sample_rate))
    samples = array("h", bytes(2 * total))

    for tone in pattern:
        start = int(round(tone.offset_s * sample_rate))
        n = int(round(tone.duration_s * sample_rate))
        if n <= 0:
            continue
        decay = math.log(FLOOR_GAIN / PEAK_GAIN) / n
        step = 2.0 * math.pi * tone.freq_hz / sample_rate
        for i in range(n):
            idx = start + i
            if idx >= total:
                break
            gain = PEAK_GAIN * math.exp(decay * i) * volume
            value = samples[idx] + int(_INT16_MAX * gain * math.sin(step * i))
            samples[idx] = max(-_INT16_MAX, min(_INT16_MAX, value))

    if sys.byteorder != "little":
        samples.byteswap()
    return samples.tobytes()
