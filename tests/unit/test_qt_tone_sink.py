"""
Unit tests for safetyhalo.audio.qt_tone_sink.QtToneSink.

These tests validate buffer ownership across playbacks: starting a new
pattern releases the buffer of the previous one. The audio device is
replaced by a fake, so no sound is produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pytest

pytest.importorskip("PySide6.QtMultimedia")

import shiboken6  # noqa: E402
from PySide6.QtCore import QBuffer, QCoreApplication, QEvent  # noqa: E402
from PySide6.QtMultimedia import QAudio  # noqa: E402

from safetyhalo.audio.qt_tone_sink import QtToneSink  # noqa: E402

PCM = b"\x00\x00" * 64


@dataclass
class FakeAudioSink:
    """
    Stand-in for QAudioSink that records the devices it was started with.
    """

    started: List[QBuffer] = field(default_factory=list)

    def state(self):
        return QAudio.State.StoppedState

    def stop(self) -> None:
        pass

    def start(self, device: QBuffer) -> None:
        self.started.append(device)


@pytest.fixture(scope="module")
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])


def test_previous_buffer_is_released_on_next_playback(qapp, monkeypatch) -> None:
    sink = QtToneSink()
    fake = FakeAudioSink()
    monkeypatch.setattr(sink, "_ensure_sink", lambda: fake)

    for _ in range(3):
        sink._start_playback(PCM)
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)

    assert len(fake.started) == 3
    assert not shiboken6.isValid(fake.started[0])
    assert not shiboken6.isValid(fake.started[1])
    assert shiboken6.isValid(fake.started[2])
    assert len(sink.findChildren(QBuffer)) == 1
