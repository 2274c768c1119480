# tests/conftest.py

from __future__ import annotations

import random
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpulse.audio.synth import FeedbackSynthesizer
from taskpulse.cli.bootstrap import create_initial_state
from taskpulse.core.state import AppState
from taskpulse.effects.board import EffectsBoard
from taskpulse.tasks.task_store import TaskStore

from .fakes import CountingFactory, FakeKVStore, ManualScheduler, RecordingAudioBackend


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap.

    We intentionally use a SimpleNamespace rather than the real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskpulse-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        store_path=tmp_path / "data" / "storage.json",
        storage_key="react-todo-list",
        persist=True,
        sound_enabled=True,
        sample_rate=8000,
        master_volume=1.0,
        boot_animation=False,
    )


@pytest.fixture()
def kv() -> FakeKVStore:
    return FakeKVStore()


@pytest.fixture()
def store(kv: FakeKVStore) -> TaskStore:
    return TaskStore(kv)


@pytest.fixture()
def backend() -> RecordingAudioBackend:
    return RecordingAudioBackend()


@pytest.fixture()
def factory(backend: RecordingAudioBackend) -> CountingFactory:
    return CountingFactory(backend)


@pytest.fixture()
def synth(factory: CountingFactory) -> FeedbackSynthesizer:
    return FeedbackSynthesizer(factory)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def effects(scheduler: ManualScheduler) -> EffectsBoard:
    return EffectsBoard(scheduler=scheduler, rng=random.Random(7))


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    kv: FakeKVStore,
    factory: CountingFactory,
    effects: EffectsBoard,
) -> AppState:
    """
    AppState wired with deterministic fakes (storage, audio, timers).
    """
    return create_initial_state(settings=settings, kv=kv, backend_factory=factory, effects=effects)
