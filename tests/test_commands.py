# tests/test_commands.py

from __future__ import annotations

import json

import pytest

from taskpulse.cli.commands import CommandRegistry, registry
from taskpulse.connectors.console_connector import await_celebration, handle_line
from taskpulse.core.state import AppState
from taskpulse.tasks.task_models import Priority

from .fakes import CountingFactory, FakeKVStore, ManualScheduler


def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_plain_text_adds_task(state: AppState, kv: FakeKVStore, factory: CountingFactory) -> None:
    reply = handle_line(state, "Buy milk")
    assert reply == "Added: Buy milk (Medium)."
    assert json.loads(kv.data["react-todo-list"])[0]["text"] == "Buy milk"
    assert factory.calls == 1
    assert handle_line(state, "   ") is None


def test_walkthrough_by_commands(state: AppState, scheduler: ManualScheduler, factory: CountingFactory) -> None:
    registry.handle(state, "/add Buy milk")
    registry.handle(state, "/priority high")
    registry.handle(state, "/add Call Alice")

    listing = registry.handle(state, "/list") or ""
    assert listing.index("Call Alice") < listing.index("Buy milk")
    assert "[HIGH] Call Alice" in listing

    assert registry.handle(state, "/done 2") == "Completed: Buy milk."
    assert "1 of 2 tasks completed" in (registry.handle(state, "/list") or "")

    assert registry.handle(state, "/del 1") == "Deleted: Call Alice."
    listing = registry.handle(state, "/list") or ""
    assert "1 of 1 tasks completed" in listing
    assert "100%" in listing
    assert "GOAL ACHIEVED" in listing

    emitted: list[str] = []
    reply = registry.handle(state, "/celebrate", emit=emitted.append)
    assert reply == "Goal achieved! Celebrating."
    assert emitted == ["GOAL ACHIEVED"]
    assert len(state.task_store.tasks) == 1

    scheduler.advance_to(0.4)
    victory = factory.backend.events[-1]
    assert len(victory) == 5
    assert state.effects.celebrating is True

    events = len(factory.backend.events)
    assert registry.handle(state, "/clear") == "Cleared 1 finished task(s)."
    assert state.task_store.tasks == ()
    assert len(factory.backend.events) == events


def test_celebrate_refuses_open_list(state: AppState, scheduler: ManualScheduler) -> None:
    assert registry.handle(state, "/celebrate") == "Nothing to celebrate yet. Add a task first."
    registry.handle(state, "/add one")
    assert registry.handle(state, "/celebrate") == "1 task(s) still open. Finish them to celebrate."
    assert scheduler.timers == []


def test_done_on_last_task_points_at_celebrate(state: AppState) -> None:
    registry.handle(state, "/add only")
    assert registry.handle(state, "/done 1") == "Completed: only. All tasks done! Use /celebrate to celebrate."


def test_clear_refuses_open_tasks_without_all(state: AppState) -> None:
    assert registry.handle(state, "/clear") == "Nothing to clear."
    registry.handle(state, "/add one")
    assert "still open" in (registry.handle(state, "/clear") or "")
    assert registry.handle(state, "/clear all") == "All tasks removed."
    assert state.task_store.tasks == ()


def test_bad_numbers(state: AppState) -> None:
    registry.handle(state, "/add one")
    assert registry.handle(state, "/done 5") == "No task #5."
    assert registry.handle(state, "/del x") == "No task #x."
    assert registry.handle(state, "/done") == "Usage: /done <number>."
    assert registry.handle(state, "/move 1 z") == "Position must be a number."


def test_move_command(state: AppState) -> None:
    for text in ("a", "b", "c"):
        registry.handle(state, f"/add {text}")
    assert registry.handle(state, "/move 1 3") == "Moved: c."
    assert [t.text for t in state.task_store.tasks] == ["b", "a", "c"]


def test_priority_cycle_and_invalid(state: AppState) -> None:
    assert registry.handle(state, "/priority") == "Priority for new tasks: High."
    assert registry.handle(state, "/p") == "Priority for new tasks: Low."
    assert registry.handle(state, "/priority urgent") == "Usage: /priority [low|medium|high]."
    assert state.controller.priority is Priority.LOW


def test_sound_toggle(state: AppState, factory: CountingFactory) -> None:
    assert registry.handle(state, "/sound off") == "Sound muted."
    registry.handle(state, "/add quiet")
    assert factory.calls == 0
    assert "OFF" in (registry.handle(state, "/sound") or "")

    assert registry.handle(state, "/sound on") == "Sound enabled."
    registry.handle(state, "/credits")
    assert factory.calls == 1


def test_crashing_command_is_reported(state: AppState, monkeypatch) -> None:
    def boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(state.controller, "credits", boom)
    assert handle_line(state, "/credits") == "Internal error while handling a command."


def test_help_lists_commands(state: AppState) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("/add", "/done", "/del", "/move", "/priority", "/clear", "/celebrate", "/sound", "/credits"):
        assert name in text


def _finished(state: AppState) -> None:
    registry.handle(state, "/add only")
    registry.handle(state, "/done 1")


def test_next_input_dismisses_celebration(state: AppState, scheduler: ManualScheduler) -> None:
    _finished(state)
    handle_line(state, "/celebrate")
    scheduler.advance_to(0.4)
    assert state.effects.celebrating is True

    handle_line(state, "/list")
    assert state.effects.celebrating is False


def test_console_waits_for_overlay_after_burst(state: AppState, scheduler: ManualScheduler) -> None:
    slept: list[float] = []

    def sleep(seconds: float) -> None:
        slept.append(seconds)
        scheduler.advance_to(seconds)

    assert await_celebration(state, sleep=sleep) is False

    _finished(state)
    handle_line(state, "/celebrate")
    assert await_celebration(state, sleep=sleep) is True
    assert slept == [pytest.approx(0.5)]
    assert "SYSTEM LOG" in (registry.handle(state, "/list") or "")
