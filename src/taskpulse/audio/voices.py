# src/taskpulse/audio/voices.py

from __future__ import annotations

"""
Voice descriptions for the feedback synthesizer.

A Voice is one oscillator + gain envelope. Events are short tuples of voices;
`delay` places a voice later than the event start, which is how arpeggios and
the staggered victory swell are expressed without timers.
"""

from dataclasses import dataclass
from enum import StrEnum

SILENCE_GAIN = 0.0001


class Waveform(StrEnum):
    SINE = "sine"
    SQUARE = "square"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"


@dataclass(frozen=True, slots=True)
class Voice:
    frequency: float
    waveform: Waveform = Waveform.SINE
    duration: float = 0.1  # seconds
    volume: float = 0.1  # peak gain
    delay: float = 0.0  # seconds after the event starts
    attack: float = 0.0  # linear fade-in; 0 => instant attack
    glide: float = 1.0  # end frequency = frequency * glide (exponential)

    @property
    def end_time(self) -> float:
        return self.delay + self.duration


def click() -> tuple[Voice, ...]:
    return (Voice(800, Waveform.SQUARE, 0.05, 0.02),)


def add() -> tuple[Voice, ...]:
    return (
        Voice(400, Waveform.SINE, 0.1, 0.05),
        Voice(600, Waveform.SINE, 0.15, 0.05, delay=0.05),
    )


def toggle(now_completed: bool) -> tuple[Voice, ...]:
    if now_completed:
        # success shimmer, roughly a major third up
        return (
            Voice(1200, Waveform.SINE, 0.1, 0.03),
            Voice(1500, Waveform.SINE, 0.2, 0.02, delay=0.04),
        )
    return (Voice(600, Waveform.SINE, 0.1, 0.03),)


def delete() -> tuple[Voice, ...]:
    return (Voice(300, Waveform.SAWTOOTH, 0.1, 0.02),)


VICTORY_BASE_HZ = 220.0
VICTORY_HARMONICS = (1.0, 1.5, 2.0, 2.5, 3.0)
VICTORY_STAGGER = 0.15
VICTORY_DURATION = 2.5


def victory() -> tuple[Voice, ...]:
    return tuple(
        Voice(
            VICTORY_BASE_HZ * h,
            Waveform.SINE,
            VICTORY_DURATION,
            0.05,
            delay=i * VICTORY_STAGGER,
            attack=0.5,
            glide=1.5,
        )
        for i, h in enumerate(VICTORY_HARMONICS)
    )


def credits() -> tuple[Voice, ...]:
    return (
        Voice(660, Waveform.SINE, 1.2, 0.02),
        Voice(440, Waveform.SINE, 1.5, 0.02, delay=0.1),
    )
