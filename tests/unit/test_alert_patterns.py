"""
Unit tests for alert tone patterns and PCM rendering.

These tests validate:
- DANGER / WARNING / SAFE map to their fixed tone patterns
- PCM output length follows the pattern length and sample rate
- the decay envelope starts loud and ends near silence
"""

from __future__ import annotations

from array import array

import pytest

from safetyhalo.audio.pcm import render_pattern
from safetyhalo.core.alert.patterns import Tone, pattern_for, pattern_length_s
from safetyhalo.domain.models import SafetyStatus


def test_danger_pattern_is_four_short_high_beeps() -> None:
    p = pattern_for(SafetyStatus.DANGER)
    assert len(p) == 4
    assert all(t.freq_hz == 900.0 and t.duration_s == 0.15 for t in p)
    assert [t.offset_s for t in p] == pytest.approx([0.0, 0.2, 0.4, 0.6])


def test_warning_pattern_is_one_long_low_beep() -> None:
    assert pattern_for(SafetyStatus.WARNING) == (Tone(440.0, 0.5, 0.0),)


def test_safe_pattern_is_silent() -> None:
    assert pattern_for(SafetyStatus.SAFE) == ()


def test_pattern_length() -> None:
    assert pattern_length_s(pattern_for(SafetyStatus.DANGER)) == pytest.approx(0.75)
    assert pattern_length_s(()) == 0.0


def test_render_empty_pattern_is_empty() -> None:
    assert render_pattern(()) == b""


def test_render_length_matches_duration() -> None:
    pcm = render_pattern(pattern_for(SafetyStatus.WARNING), sample_rate=8000)
    assert len(pcm) == 2 * 4000


def test_render_envelope_decays() -> None:
    pcm = render_pattern((Tone(440.0, 0.5, 0.0),), sample_rate=8000)
    samples = array("h", pcm)
    head = max(abs(s) for s in samples[:200])
    tail = max(abs(s) for s in samples[-200:])
    assert head > 1000
    assert tail < 50


def test_render_leaves_gaps_silent() -> None:
    pcm = render_pattern(pattern_for(SafetyStatus.DANGER), sample_rate=8000)
    samples = array("h", pcm)
    # 150 ms tone then 50 ms gap before the second onset
    gap = samples[int(0.16 * 8000):int(0.19 * 8000)]
    assert all(s == 0 for s in gap)
