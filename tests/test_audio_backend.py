# tests/test_audio_backend.py

from __future__ import annotations

import sys
from types import SimpleNamespace

import numpy as np
import pytest

from taskpulse.audio.backend import Mixer, NullAudioBackend, SoundDeviceBackend, render_voice
from taskpulse.audio.voices import SILENCE_GAIN, Voice, Waveform

SR = 8000


def test_render_length_and_dtype() -> None:
    buf = render_voice(Voice(440, duration=0.1, volume=0.05), SR)
    assert buf.dtype == np.float32
    assert len(buf) == 800


def test_instant_attack_exponential_decay() -> None:
    buf = render_voice(Voice(400, Waveform.SQUARE, duration=0.1, volume=0.05), SR)
    # square wave: |sample| == envelope
    env = np.abs(buf)
    assert env[0] == pytest.approx(0.05, rel=1e-4)
    assert env[-1] < 0.05 * 0.01
    assert env[-1] >= SILENCE_GAIN * 0.9
    assert np.all(np.diff(env) <= 1e-9)


def test_attack_fades_in_then_out() -> None:
    v = Voice(220, duration=2.5, volume=0.05, attack=0.5)
    buf = render_voice(v, SR)
    peak_region = np.abs(buf[int(0.45 * SR) : int(0.55 * SR)]).max()
    assert np.abs(buf[:100]).max() < 0.05 * 0.05
    assert peak_region == pytest.approx(0.05, rel=0.05)
    assert np.abs(buf[-100:]).max() < 0.001


def test_zero_volume_is_silent() -> None:
    buf = render_voice(Voice(440, duration=0.1, volume=0.0), SR)
    assert len(buf) == 800
    assert not buf.any()


def test_glide_raises_pitch() -> None:
    v = Voice(200, Waveform.SAWTOOTH, duration=1.0, volume=0.5, glide=2.0)
    buf = render_voice(v, SR)
    # sawtooth wraps once per cycle: count the big downward jumps
    drops_first = int(np.sum(np.diff(buf[: SR // 10]) < -0.1))
    drops_last = int(np.sum(np.diff(buf[-SR // 10 :]) < -0.0001))
    assert drops_first == pytest.approx(20, abs=2)
    assert drops_last == pytest.approx(40, abs=3)


def test_mixer_sums_overlapping_buffers() -> None:
    m = Mixer()
    m.add(np.full(4, 0.25, dtype=np.float32))
    m.add(np.full(4, 0.5, dtype=np.float32), delay_frames=2)

    out = m.mix(8)
    assert out.tolist() == pytest.approx([0.25, 0.25, 0.75, 0.75, 0.5, 0.5, 0.0, 0.0])
    assert m.active == 0


def test_mixer_delay_spans_blocks_and_clips() -> None:
    m = Mixer()
    m.add(np.full(3, 0.9, dtype=np.float32), delay_frames=5)
    m.add(np.full(10, 0.9, dtype=np.float32))

    first = m.mix(4)
    assert first.tolist() == pytest.approx([0.9] * 4)
    second = m.mix(4)
    assert second.tolist() == pytest.approx([0.9, 1.0, 1.0, 1.0])
    third = m.mix(4)
    assert third.tolist() == pytest.approx([0.9, 0.9, 0.0, 0.0])
    assert m.active == 0


def test_mixer_ignores_empty_buffers() -> None:
    m = Mixer()
    m.add(np.zeros(0, dtype=np.float32))
    assert m.active == 0


def test_null_backend_accepts_everything() -> None:
    b = NullAudioBackend()
    b.schedule([Voice(440)])
    b.close()


class FakeStream:
    """Stands in for sounddevice.OutputStream; keeps the callback for the test to drive."""

    instances: list[FakeStream] = []

    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.callback = kwargs["callback"]
        self.started = False
        self.stopped = False
        self.closed = False
        FakeStream.instances.append(self)

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_sounddevice(monkeypatch):
    FakeStream.instances = []
    monkeypatch.setitem(sys.modules, "sounddevice", SimpleNamespace(OutputStream=FakeStream))
    return FakeStream


def _pull(stream: FakeStream, frames: int) -> np.ndarray:
    outdata = np.full((frames, 1), 9.0, dtype=np.float32)
    stream.callback(outdata, frames, None, None)
    return outdata[:, 0].copy()


def test_sounddevice_backend_opens_mono_stream(fake_sounddevice) -> None:
    SoundDeviceBackend(sample_rate=1000, blocksize=64)
    (stream,) = fake_sounddevice.instances
    assert stream.started is True
    assert stream.kwargs["samplerate"] == 1000
    assert stream.kwargs["channels"] == 1
    assert stream.kwargs["dtype"] == "float32"
    assert stream.kwargs["blocksize"] == 64


def test_sounddevice_backend_delays_and_scales_voices(fake_sounddevice) -> None:
    backend = SoundDeviceBackend(sample_rate=1000, master_volume=0.5)
    (stream,) = fake_sounddevice.instances
    backend.schedule([Voice(100, waveform=Waveform.SQUARE, duration=0.05, volume=0.2, delay=0.005)])

    first = _pull(stream, 16)
    assert np.all(first[:5] == 0.0)
    assert first[5] == pytest.approx(0.1, rel=1e-4)
    assert np.max(np.abs(first)) == pytest.approx(0.1, rel=1e-4)

    rest = _pull(stream, 64)
    assert np.any(rest[:39] != 0.0)
    assert np.all(rest[39:] == 0.0)
    assert backend.mixer.active == 0


def test_sounddevice_backend_silence_without_voices(fake_sounddevice) -> None:
    SoundDeviceBackend(sample_rate=1000)
    (stream,) = fake_sounddevice.instances
    assert np.all(_pull(stream, 32) == 0.0)


def test_sounddevice_backend_close_stops_stream(fake_sounddevice) -> None:
    backend = SoundDeviceBackend(sample_rate=1000)
    backend.close()
    (stream,) = fake_sounddevice.instances
    assert stream.stopped is True
    assert stream.closed is True


def test_sounddevice_backend_close_failure_is_swallowed(fake_sounddevice) -> None:
    backend = SoundDeviceBackend(sample_rate=1000)
    (stream,) = fake_sounddevice.instances

    def boom() -> None:
        raise RuntimeError("device gone")

    stream.stop = boom
    backend.close()
