from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QObject, Signal, Slot
from PySide6.QtMultimedia import QAudio, QAudioFormat, QAudioSink, QMediaDevices

from safetyhalo.audio.pcm import DEFAULT_SAMPLE_RATE, render_pattern
from safetyhalo.core.alert.patterns import AlertPattern

log = logging.getLogger(__name__)


class QtToneSink(QObject):
    """
    Tone sink backed by Qt Multimedia.

    Concurrency Model
    -----------------
    The object must be created on the GUI thread. `play` may be called from
    any thread: the rendered PCM is handed over through a queued signal and
    playback is started on the GUI thread, so the caller never waits.

    The `QAudioSink` is created lazily on the first pattern and reused for the
    lifetime of the object. A new pattern interrupts the one still playing.

    Parameters
    ----------
    sample_rate
        PCM sample rate.
    volume
        Linear volume applied when rendering (0-1).
    """

    _pcm_ready = Signal(bytes)

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE, volume: float = 1.0, parent=None) -> None:
        super().__init__(parent)
        self._sample_rate = sample_rate
        self._volume = volume
        self._sink: Optional[QAudioSink] = None
        self._buffer: Optional[QBuffer] = None
        self._pcm_ready.connect(self._start_playback)

    def play(self, pattern: AlertPattern) -> None:
        if not pattern:
            return
        self._pcm_ready.emit(render_pattern(pattern, self._sample_rate, self._volume))

    def _ensure_sink(self) -> QAudioSink:
        if self._sink is None:
            fmt = QAudioFormat()
            fmt.setSampleRate(self._sample_rate)
            fmt.setChannelCount(1)
            fmt.setSampleFormat(QAudioFormat.SampleFormat.Int16)

            device = QMediaDevices.defaultAudioOutput()
            if device.isNull():
                raise RuntimeError("No audio output device available")
            self._sink = QAudioSink(device, fmt, self)
        return self._sink

    @Slot(bytes)
    def _start_playback(self, pcm: bytes) -> None:
        try:
            sink = self._ensure_sink()
            if sink.state() != QAudio.State.StoppedState:
                sink.stop()
            if self._buffer is not None:
                self._buffer.close()
                self._buffer.deleteLater()

            self._buffer = QBuffer(self)
            self._buffer.setData(QByteArray(pcm))
            self._buffer.open(QIODevice.OpenModeFlag.ReadOnly)
            sink.start(self._buffer)
        except Exception as e:
            log.warning("Audio playback failed: %r", e)
