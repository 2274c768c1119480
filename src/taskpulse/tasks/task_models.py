# src/taskpulse/tasks/task_models.py

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    """
    Task priority tag.

    Values are stored verbatim in the persisted JSON ("Low", "Medium", "High").
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, raw: Any) -> Priority:
        """Lenient parse for user input ("high", "H", ...). Unknown -> MEDIUM."""
        if isinstance(raw, Priority):
            return raw
        s = str(raw or "").strip().lower()
        for p in cls:
            if s and p.value.lower().startswith(s):
                return p
        return cls.MEDIUM

    def next(self) -> Priority:
        """Cycle Low -> Medium -> High -> Low."""
        order = list(Priority)
        return order[(order.index(self) + 1) % len(order)]


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool = False
    priority: Priority = Priority.MEDIUM

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "priority": self.priority.value,
        }

    @classmethod
    def from_record(cls, raw: Any) -> Task:
        """
        Build a Task from one persisted record.

        Raises ValueError when the record does not have the persisted shape;
        the store treats that as corrupt data.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"task record must be an object, got {type(raw).__name__}")

        tid = raw.get("id")
        # bool is an int subclass; true/false are not ids.
        if isinstance(tid, bool) or not isinstance(tid, (int, float)):
            raise ValueError(f"task id must be a number, got {tid!r}")
        if isinstance(tid, float):
            if not tid.is_integer():
                raise ValueError(f"task id must be integral, got {tid!r}")
            tid = int(tid)

        text = raw.get("text")
        if not isinstance(text, str):
            raise ValueError(f"task text must be a string, got {text!r}")

        completed = raw.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError(f"task completed must be a boolean, got {completed!r}")

        priority_raw = raw.get("priority", Priority.MEDIUM.value)
        try:
            priority = Priority(priority_raw)
        except ValueError:
            priority = Priority.MEDIUM

        return cls(id=tid, text=text, completed=completed, priority=priority)


def round_half_up(value: float) -> int:
    """Round like JavaScript Math.round (halves go up, also for 12.5)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    percentage: int

    @classmethod
    def of(cls, tasks: list[Task] | tuple[Task, ...]) -> TaskStats:
        total = len(tasks)
        done = sum(1 for t in tasks if t.completed)
        pct = 0 if total == 0 else round_half_up(done / total * 100)
        return cls(total=total, completed=done, percentage=pct)

    @property
    def is_victory(self) -> bool:
        """A non-empty list with every task completed."""
        return self.total > 0 and self.completed == self.total
