# src/taskpulse/core/controller.py

from __future__ import annotations

"""
Todo controller.

Turns user intents into TaskStore mutations and the matching feedback:
- store mutation first (it persists before returning),
- then a sound chosen from the outcome,
- and, when a finished list is cleared, the celebration burst.

Rendering belongs to the connector; the controller only hands out ViewState
snapshots.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..effects.board import EffectsBoard
from ..tasks.task_models import Priority, Task, TaskStats
from ..tasks.task_store import TaskStore
from .ports import FeedbackPlayer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ViewState:
    tasks: tuple[Task, ...]
    stats: TaskStats
    priority: Priority
    celebrating: bool = False
    impact: bool = False

    @property
    def victory(self) -> bool:
        return self.stats.is_victory


class TodoController:
    def __init__(
        self,
        store: TaskStore,
        feedback: FeedbackPlayer,
        effects: EffectsBoard | None = None,
        *,
        priority: Priority = Priority.MEDIUM,
    ) -> None:
        self.store = store
        self.feedback = feedback
        self.effects = effects
        self.priority = priority

    # ---- priority selection ----

    def change_priority(self, priority: Priority | str) -> Priority:
        self.priority = Priority.parse(priority)
        return self.priority

    def cycle_priority(self) -> Priority:
        self.priority = self.priority.next()
        self.feedback.play_click()
        return self.priority

    # ---- intents ----

    def add(self, text: str) -> Task | None:
        task = self.store.add(text, self.priority)
        if task is not None:
            self.feedback.play_add()
        return task

    def toggle(self, task_id: int) -> bool | None:
        completed = self.store.toggle(task_id)
        if completed is not None:
            self.feedback.play_toggle(completed)
        return completed

    def delete(self, task_id: int) -> bool:
        removed = self.store.delete(task_id)
        self.feedback.play_delete()
        return removed

    def reorder(self, new_order: Iterable[Task]) -> None:
        self.store.reorder(new_order)

    def move(self, task_id: int, position: int) -> bool:
        """
        Move one task to `position` (0-based, clamped), like dropping it in a
        drag-and-drop list. Builds the permutation and hands it to reorder().
        """
        tasks = list(self.store.snapshot())
        idx = next((i for i, t in enumerate(tasks) if t.id == task_id), None)
        if idx is None:
            return False
        task = tasks.pop(idx)
        position = min(max(position, 0), len(tasks))
        tasks.insert(position, task)
        self.store.reorder(tasks)
        return True

    def celebrate(self) -> bool:
        """
        Replay the goal-achieved celebration. Only a complete list qualifies;
        the tasks stay where they are, so this can be repeated.
        """
        if not self.store.stats().is_victory:
            return False
        logger.info("Goal achieved: celebration triggered.")
        if self.effects is not None:
            self.effects.burst(on_celebrate=self.feedback.play_victory)
        else:
            self.feedback.play_victory()
        return True

    def clear_all(self) -> int:
        """Remove every task. Returns how many were removed."""
        removed = len(self.store)
        self.store.clear_all()
        return removed

    def credits(self) -> None:
        self.feedback.play_credits()

    # ---- derived state ----

    def stats(self) -> TaskStats:
        return self.store.stats()

    def view(self) -> ViewState:
        celebrating = bool(self.effects and self.effects.celebrating)
        impact = bool(self.effects and self.effects.impact)
        return ViewState(
            tasks=self.store.snapshot(),
            stats=self.store.stats(),
            priority=self.priority,
            celebrating=celebrating,
            impact=impact,
        )
