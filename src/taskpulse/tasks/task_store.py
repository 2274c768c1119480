# src/taskpulse/tasks/task_store.py

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable, Iterable

from ..core.ports import KeyValueStore
from .task_models import Priority, Task, TaskStats

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "react-todo-list"


def _copy(t: Task) -> Task:
    return Task(t.id, t.text, t.completed, t.priority)


class MonotonicIdFactory:
    """
    Creation-order id generator.

    Ids start at the current wall clock in milliseconds (so they look like the
    timestamp ids older data already carries) but never repeat or go backwards,
    even when several tasks are created within the same clock tick.
    """

    def __init__(self, floor: int = 0, clock: Callable[[], float] = time.time) -> None:
        self._last = int(floor)
        self._clock = clock
        self._lock = threading.Lock()

    def bump(self, floor: int) -> None:
        """Make sure the next id is greater than `floor`."""
        with self._lock:
            self._last = max(self._last, int(floor))

    def __call__(self) -> int:
        with self._lock:
            now_ms = int(self._clock() * 1000)
            self._last = max(self._last + 1, now_ms)
            return self._last


class TaskStore:
    """
    Ordered task list with write-through persistence.

    The list lives in memory and is the source of truth for the session.
    Every mutation serializes the whole list into one string and writes it to
    the injected key-value store before returning. Storage failures are logged
    and swallowed (best-effort persistence), load failures degrade to an empty
    list.

    Not-found ids and empty task text are silent no-ops.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        id_factory: Callable[[], int] | None = None,
    ) -> None:
        self._kv = kv
        self._key = key
        self._tasks: list[Task] = []

        self._counter: MonotonicIdFactory | None = None
        if id_factory is None:
            self._counter = MonotonicIdFactory()
            id_factory = self._counter
        self._id_factory = id_factory

        self.load()
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- persistence ----

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[Task]:
        """
        (Re)load the list from persistence.

        Absent key -> empty list. Anything that is not a JSON array of task
        records -> warning + empty list. Never raises.
        """
        try:
            raw = self._kv.read_string(self._key)
        except Exception:
            logger.exception("Failed to read persisted tasks (key=%s); starting empty.", self._key)
            raw = None

        tasks: list[Task] = []
        if raw is not None:
            try:
                tasks = self.deserialize(raw)
            except ValueError as e:
                logger.warning("Persisted tasks are corrupt (key=%s): %s; starting empty.", self._key, e)
                tasks = []

        self._tasks = tasks
        if self._counter is not None and tasks:
            self._counter.bump(max(t.id for t in tasks))
        return list(tasks)

    def serialize(self) -> str:
        return json.dumps([t.to_record() for t in self._tasks], ensure_ascii=False)

    @staticmethod
    def deserialize(raw: str) -> list[Task]:
        """Parse the persisted JSON array. Raises ValueError on any shape problem."""
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as e:
            raise ValueError(f"not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")

        tasks = [Task.from_record(item) for item in data]

        seen: set[int] = set()
        for t in tasks:
            if t.id in seen:
                raise ValueError(f"duplicate task id {t.id}")
            seen.add(t.id)
        return tasks

    def _persist(self) -> None:
        try:
            payload = self.serialize()
            ok = self._kv.write_string(self._key, payload)
        except Exception:
            logger.exception("Failed to persist %d tasks (key=%s).", len(self._tasks), self._key)
            return
        if not ok:
            logger.warning("Storage rejected write of %d tasks (key=%s).", len(self._tasks), self._key)

    # ---- queries ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self.snapshot()

    def snapshot(self) -> tuple[Task, ...]:
        """Copies of the current tasks in list order (safe to hand to the renderer)."""
        return tuple(_copy(t) for t in self._tasks)

    def _find(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def get(self, task_id: int) -> Task | None:
        """A copy of the task with this id, or None."""
        t = self._find(task_id)
        return None if t is None else _copy(t)

    def __len__(self) -> int:
        return len(self._tasks)

    def stats(self) -> TaskStats:
        return TaskStats.of(self._tasks)

    # ---- mutations ----

    def _fresh_id(self) -> int:
        taken = {t.id for t in self._tasks}
        tid = int(self._id_factory())
        while tid in taken:
            tid = int(self._id_factory())
        return tid

    def add(self, text: str, priority: Priority = Priority.MEDIUM) -> Task | None:
        text = (text or "").strip()
        if not text:
            return None

        task = Task(id=self._fresh_id(), text=text, completed=False, priority=Priority.parse(priority))
        self._tasks.insert(0, task)
        self._persist()
        logger.debug("Task added id=%s priority=%s", task.id, task.priority)
        return _copy(task)

    def toggle(self, task_id: int) -> bool | None:
        """Flip `completed`. Returns the new value, or None when the id is unknown."""
        task = self._find(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        self._persist()
        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
        return task.completed

    def delete(self, task_id: int) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before
        self._persist()
        if removed:
            logger.debug("Task deleted id=%s", task_id)
        return removed

    def reorder(self, new_order: Iterable[Task]) -> None:
        """
        Replace the list with `new_order`.

        The caller owns the permutation check; the store only copies what it is given.
        """
        self._tasks = [_copy(t) for t in new_order]
        self._persist()

    def clear_all(self) -> None:
        n = len(self._tasks)
        self._tasks = []
        self._persist()
        logger.info("Cleared %d tasks.", n)
