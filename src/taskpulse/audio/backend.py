# src/taskpulse/audio/backend.py

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from .voices import SILENCE_GAIN, Voice, Waveform

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44100


def render_voice(voice: Voice, sample_rate: int = DEFAULT_SAMPLE_RATE) -> np.ndarray:
    """
    Render one voice to a mono float32 buffer.

    - Oscillator phase is accumulated from the instantaneous frequency, so an
      exponential glide stays click-free.
    - Envelope: optional linear attack to `volume`, then exponential decay to
      SILENCE_GAIN at the end of the voice (instant attack when attack == 0).
    """
    n = max(int(round(voice.duration * sample_rate)), 0)
    if n == 0 or voice.volume <= 0:
        return np.zeros(n, dtype=np.float32)

    t = np.arange(n, dtype=np.float64) / sample_rate

    if voice.glide != 1.0:
        freq = voice.frequency * np.power(voice.glide, t / voice.duration)
    else:
        freq = np.full(n, float(voice.frequency))
    cycles = (np.cumsum(freq) - freq[0]) / sample_rate
    frac = cycles - np.floor(cycles)

    if voice.waveform is Waveform.SQUARE:
        wave = np.where(frac < 0.5, 1.0, -1.0)
    elif voice.waveform is Waveform.SAWTOOTH:
        wave = 2.0 * frac - 1.0
    elif voice.waveform is Waveform.TRIANGLE:
        wave = 4.0 * np.abs(frac - 0.5) - 1.0
    else:
        wave = np.sin(2.0 * np.pi * cycles)

    floor = min(SILENCE_GAIN, voice.volume)
    attack = min(max(voice.attack, 0.0), voice.duration)
    env = np.empty(n, dtype=np.float64)
    if attack > 0:
        rising = t < attack
        env[rising] = voice.volume * t[rising] / attack
        decay_len = max(voice.duration - attack, 1.0 / sample_rate)
        rest = ~rising
        env[rest] = voice.volume * np.power(floor / voice.volume, (t[rest] - attack) / decay_len)
    else:
        env[:] = voice.volume * np.power(floor / voice.volume, t / voice.duration)

    return (wave * env).astype(np.float32)


@dataclass(slots=True)
class _Pending:
    buffer: np.ndarray
    wait: int  # frames until the buffer starts
    pos: int = 0  # frames of the buffer already played


class Mixer:
    """
    Sums every pending buffer into the output, so overlapping events sound
    together instead of cutting each other off.

    `add` is called from the UI thread, `mix` from the audio callback thread.
    """

    def __init__(self) -> None:
        self._pending: list[_Pending] = []
        self._lock = threading.Lock()

    def add(self, buffer: np.ndarray, delay_frames: int = 0) -> None:
        if buffer.size == 0:
            return
        with self._lock:
            self._pending.append(_Pending(buffer=buffer, wait=max(int(delay_frames), 0)))

    @property
    def active(self) -> int:
        with self._lock:
            return len(self._pending)

    def mix(self, frames: int) -> np.ndarray:
        out = np.zeros(frames, dtype=np.float32)
        with self._lock:
            keep: list[_Pending] = []
            for p in self._pending:
                if p.wait >= frames:
                    p.wait -= frames
                    keep.append(p)
                    continue
                start = p.wait
                p.wait = 0
                chunk = p.buffer[p.pos : p.pos + (frames - start)]
                out[start : start + len(chunk)] += chunk
                p.pos += len(chunk)
                if p.pos < len(p.buffer):
                    keep.append(p)
            self._pending = keep
        np.clip(out, -1.0, 1.0, out=out)
        return out


class SoundDeviceBackend:
    """
    Real audio output: a single sounddevice OutputStream fed by a Mixer.

    Constructing the backend opens and starts the stream; this is the lazy
    activation step of the synthesizer. Any failure (no PortAudio, no device)
    propagates to the caller, which decides to run silent.
    """

    def __init__(
        self,
        *,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        master_volume: float = 1.0,
        blocksize: int = 512,
    ) -> None:
        import sounddevice as sd  # type: ignore

        self.sample_rate = int(sample_rate)
        self.master_volume = float(master_volume)
        self.mixer = Mixer()

        def callback(outdata: Any, frames: int, time_info: Any, status: Any) -> None:
            if status:
                logger.debug("Audio stream status: %s", status)
            outdata[:, 0] = self.mixer.mix(frames)

        self._stream = sd.OutputStream(
            samplerate=self.sample_rate,
            channels=1,
            dtype="float32",
            blocksize=blocksize,
            callback=callback,
        )
        self._stream.start()
        logger.info("Audio output ready (sample_rate=%s).", self.sample_rate)

    def schedule(self, voices: Sequence[Voice]) -> None:
        for v in voices:
            buf = render_voice(v, self.sample_rate)
            if self.master_volume != 1.0:
                buf *= self.master_volume
            self.mixer.add(buf, delay_frames=int(round(v.delay * self.sample_rate)))

    def close(self) -> None:
        try:
            self._stream.stop()
            self._stream.close()
        except Exception:
            logger.debug("Audio stream close failed.", exc_info=True)


class NullAudioBackend:
    """Discards every voice (sound disabled in settings)."""

    def schedule(self, voices: Sequence[Voice]) -> None:
        return

    def close(self) -> None:
        return
