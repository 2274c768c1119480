# src/taskpulse/audio/synth.py

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from enum import StrEnum

from ..core.ports import AudioBackend, AudioBackendFactory
from . import voices as cues
from .voices import Voice

logger = logging.getLogger(__name__)


class SynthState(StrEnum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"


class FeedbackSynthesizer:
    """
    Best-effort procedural sound effects for task actions.

    Design goals:
    - No audio assets: every cue is a handful of oscillator voices.
    - The output backend is created lazily on the first cue (or an explicit
      activate()), never at construction time.
    - Never blocks and never raises: the backend only schedules voices, and
      any backend failure is logged and swallowed. Task mutations must not
      depend on sound working.
    """

    def __init__(self, backend_factory: AudioBackendFactory, *, enabled: bool = True) -> None:
        self._factory = backend_factory
        self._backend: AudioBackend | None = None
        self._enabled = bool(enabled)
        self._lock = threading.Lock()

    # ---- state ----

    @property
    def state(self) -> SynthState:
        return SynthState.ACTIVE if self._backend is not None else SynthState.UNINITIALIZED

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)
        logger.debug("Feedback sound %s.", "enabled" if self._enabled else "muted")

    def activate(self) -> bool:
        """
        uninitialized -> active (one way). Returns True when active.

        If the backend cannot be created we stay uninitialized and try again
        on the next cue.
        """
        with self._lock:
            if self._backend is not None:
                return True
            try:
                self._backend = self._factory()
            except Exception as e:
                logger.debug("Audio backend unavailable, running silent: %r", e)
                return False
            logger.debug("Audio backend active: %s", type(self._backend).__name__)
            return True

    def close(self) -> None:
        """Release the output device (process exit only; not part of normal operation)."""
        backend = self._backend
        if backend is None:
            return
        try:
            backend.close()
        except Exception:
            logger.debug("Audio backend close failed.", exc_info=True)

    # ---- emission ----

    def _emit(self, name: str, voices: Sequence[Voice]) -> None:
        if not self._enabled:
            return
        if not self.activate():
            return
        assert self._backend is not None
        try:
            self._backend.schedule(voices)
        except Exception as e:
            logger.debug("Sound %s failed: %r", name, e)

    def play_click(self) -> None:
        self._emit("click", cues.click())

    def play_add(self) -> None:
        self._emit("add", cues.add())

    def play_toggle(self, now_completed: bool) -> None:
        self._emit("toggle", cues.toggle(now_completed))

    def play_delete(self) -> None:
        self._emit("delete", cues.delete())

    def play_victory(self) -> None:
        self._emit("victory", cues.victory())

    def play_credits(self) -> None:
        self._emit("credits", cues.credits())
