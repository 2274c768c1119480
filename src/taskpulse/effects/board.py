# src/taskpulse/effects/board.py

from __future__ import annotations

"""
Ephemeral celebration effects.

Particles, shockwaves, the impact shake and the celebration overlay are pure
presentation state: they are created by a burst, cleaned up by timers, and
never touch task data.
"""

import itertools
import logging
import random
import threading
from collections.abc import Callable
from dataclasses import dataclass

from ..core.ports import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

PARTICLE_COUNT = 20
PARTICLE_COLORS = ("#00ff88", "#61dafb")

IMPACT_SECONDS = 0.3
CELEBRATE_DELAY_SECONDS = 0.4
CELEBRATION_SECONDS = 6.5
PARTICLE_LIFETIME_SECONDS = 1.0
SHOCKWAVE_LIFETIME_SECONDS = 0.8


@dataclass(frozen=True, slots=True)
class Particle:
    id: int
    kind: str  # "streak" | "bit"
    x: float
    y: float
    rotation: float
    scale: float
    color: str
    duration: float


@dataclass(frozen=True, slots=True)
class Shockwave:
    id: int


def thread_timer(delay: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def make_particle(pid: int, rng: random.Random) -> Particle:
    streak = rng.random() > 0.6
    return Particle(
        id=pid,
        kind="streak" if streak else "bit",
        x=(rng.random() - 0.5) * (400 if streak else 250),
        y=(rng.random() - 0.5) * (100 if streak else 250),
        rotation=0.0 if streak else rng.random() * 360,
        scale=rng.random() * 0.5 + 0.5,
        color=PARTICLE_COLORS[0] if rng.random() > 0.5 else PARTICLE_COLORS[1],
        duration=0.6 if streak else 0.8,
    )


class EffectsBoard:
    """
    Holds the transient visual effects and their cleanup timers.

    The scheduler is injectable (threading.Timer by default) so tests can fire
    timers by hand. After close() pending timers are cancelled and late
    callbacks are ignored.
    """

    def __init__(self, *, scheduler: Scheduler = thread_timer, rng: random.Random | None = None) -> None:
        self._schedule = scheduler
        self._rng = rng or random.Random()
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._timers: list[TimerHandle] = []
        self._closed = False

        self.particles: list[Particle] = []
        self.shockwaves: list[Shockwave] = []
        self.impact = False
        self.celebrating = False

    def _later(self, delay: float, fn: Callable[[], None]) -> None:
        slot: dict[str, object] = {}

        def run() -> None:
            try:
                with self._lock:
                    if self._closed:
                        return
                try:
                    fn()
                except Exception:
                    logger.exception("Effect timer callback failed.")
            finally:
                with self._lock:
                    slot["fired"] = True
                    handle = slot.get("handle")
                    if handle is not None:
                        self._timers = [t for t in self._timers if t is not handle]

        handle = self._schedule(delay, run)
        with self._lock:
            # a very short timer may already have run on its own thread
            if not slot.get("fired") and not self._closed:
                slot["handle"] = handle
                self._timers.append(handle)

    @property
    def pending_timers(self) -> int:
        with self._lock:
            return len(self._timers)

    def burst(self, on_celebrate: Callable[[], None] | None = None) -> None:
        """Particles + shockwave + impact now, celebration overlay shortly after."""
        with self._lock:
            if self._closed:
                return
            new_particles = [make_particle(next(self._ids), self._rng) for _ in range(PARTICLE_COUNT)]
            wave = Shockwave(id=next(self._ids))
            self.particles.extend(new_particles)
            self.shockwaves.append(wave)
            self.impact = True

        new_ids = {p.id for p in new_particles}

        def end_impact() -> None:
            with self._lock:
                self.impact = False

        def celebrate() -> None:
            with self._lock:
                self.celebrating = True
            if on_celebrate is not None:
                on_celebrate()

        def end_celebration() -> None:
            with self._lock:
                self.celebrating = False

        def drop_particles() -> None:
            with self._lock:
                self.particles = [p for p in self.particles if p.id not in new_ids]

        def drop_shockwave() -> None:
            with self._lock:
                self.shockwaves = [s for s in self.shockwaves if s.id != wave.id]

        self._later(IMPACT_SECONDS, end_impact)
        self._later(CELEBRATE_DELAY_SECONDS, celebrate)
        self._later(CELEBRATION_SECONDS, end_celebration)
        self._later(PARTICLE_LIFETIME_SECONDS, drop_particles)
        self._later(SHOCKWAVE_LIFETIME_SECONDS, drop_shockwave)
        logger.debug("Burst: %d particles, shockwave %s", len(new_particles), wave.id)

    def dismiss(self) -> None:
        """Hide the celebration overlay early."""
        with self._lock:
            self.celebrating = False

    def close(self) -> None:
        with self._lock:
            self._closed = True
            timers, self._timers = self._timers, []
        for t in timers:
            try:
                t.cancel()
            except Exception:
                logger.debug("Timer cancel failed.", exc_info=True)
