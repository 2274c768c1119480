# tests/test_bootstrap.py

from __future__ import annotations

import json
from types import SimpleNamespace

from taskpulse.audio.backend import NullAudioBackend
from taskpulse.cli.bootstrap import audio_backend_factory, create_initial_state
from taskpulse.effects.board import EffectsBoard
from taskpulse.storage.kv_store import JsonFileKVStore, MemoryKVStore

from .fakes import CountingFactory, ManualScheduler


def test_persistent_state_writes_store_file(settings: SimpleNamespace, factory: CountingFactory) -> None:
    state = create_initial_state(
        settings=settings, backend_factory=factory, effects=EffectsBoard(scheduler=ManualScheduler())
    )
    assert isinstance(state.task_store._kv, JsonFileKVStore)

    state.controller.add("on disk")
    data = json.loads(settings.store_path.read_text(encoding="utf-8"))
    assert json.loads(data["react-todo-list"])[0]["text"] == "on disk"


def test_memory_only_state_leaves_disk_alone(settings: SimpleNamespace, factory: CountingFactory) -> None:
    settings.persist = False
    state = create_initial_state(
        settings=settings, backend_factory=factory, effects=EffectsBoard(scheduler=ManualScheduler())
    )
    assert isinstance(state.task_store._kv, MemoryKVStore)

    state.controller.add("ephemeral")
    assert [t.text for t in state.task_store.tasks] == ["ephemeral"]
    assert not settings.data_dir.exists()


def test_sound_disabled_uses_null_backend(settings: SimpleNamespace) -> None:
    settings.sound_enabled = False
    assert audio_backend_factory(settings) is NullAudioBackend
