# src/taskpulse/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (storage/store/synth/effects).
"""

from __future__ import annotations

import logging

from ..audio.backend import NullAudioBackend, SoundDeviceBackend
from ..audio.synth import FeedbackSynthesizer
from ..config import get_settings
from ..core.controller import TodoController
from ..core.ports import AudioBackend, AudioBackendFactory, KeyValueStore
from ..core.state import AppState
from ..effects.board import EffectsBoard
from ..storage.kv_store import JsonFileKVStore, MemoryKVStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def audio_backend_factory(settings) -> AudioBackendFactory:
    """Deferred backend construction; the synthesizer calls it on the first cue."""
    if not getattr(settings, "sound_enabled", True):
        return NullAudioBackend

    def make() -> AudioBackend:
        return SoundDeviceBackend(
            sample_rate=settings.sample_rate,
            master_volume=settings.master_volume,
        )

    return make


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    backend_factory: AudioBackendFactory | None = None,
    effects: EffectsBoard | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Every collaborator is injectable so tests can swap storage, audio and
    timers for fakes. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        if getattr(settings, "persist", True):
            _ensure_local_dirs(settings)
            kv = JsonFileKVStore(settings.store_path)
        else:
            logger.info("Persistence disabled; tasks are kept in memory only.")
            kv = MemoryKVStore()

    store = TaskStore(kv, key=settings.storage_key)
    synth = FeedbackSynthesizer(
        backend_factory or audio_backend_factory(settings),
        enabled=settings.sound_enabled,
    )
    effects = effects or EffectsBoard()

    return AppState(
        settings=settings,
        task_store=store,
        synth=synth,
        effects=effects,
        controller=TodoController(store, synth, effects),
    )
