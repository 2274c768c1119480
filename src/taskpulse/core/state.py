# src/taskpulse/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..audio.synth import FeedbackSynthesizer
from ..effects.board import EffectsBoard
from ..tasks.task_store import TaskStore
from .controller import TodoController


@dataclass
class AppState:
    # Settings object (taskpulse.config.Settings or a test stand-in).
    settings: Any

    task_store: TaskStore
    synth: FeedbackSynthesizer
    effects: EffectsBoard
    controller: TodoController

    @property
    def sound_enabled(self) -> bool:
        return self.synth.enabled
