# src/taskpulse/cli/render.py

from __future__ import annotations

from collections.abc import Iterator

from ..core.controller import ViewState
from ..tasks.task_models import Priority

PRIORITY_TAGS: dict[Priority, str] = {
    Priority.LOW: "[low ]",
    Priority.MEDIUM: "[med ]",
    Priority.HIGH: "[HIGH]",
}

PROGRESS_WIDTH = 24


def progress_bar(percentage: int, width: int = PROGRESS_WIDTH) -> str:
    filled = round(width * min(max(percentage, 0), 100) / 100)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def render_view(view: ViewState) -> str:
    """Plain-text board: stats line, numbered tasks, input hint."""
    s = view.stats
    head = f"{s.completed} of {s.total} tasks completed  {progress_bar(s.percentage)} {s.percentage}%"
    if view.victory:
        head += "  * GOAL ACHIEVED *"

    lines = [head, ""]
    if not view.tasks:
        lines.append("  All caught up! Time to relax or add a new task to get started.")
    for n, t in enumerate(view.tasks, start=1):
        mark = "x" if t.completed else " "
        lines.append(f"  {n:>2}. [{mark}] {PRIORITY_TAGS[t.priority]} {t.text}")

    lines.append("")
    if view.victory:
        lines.append("  Everything is done. Use /celebrate to replay the celebration, /clear to clear finished tasks.")
    lines.append(f"  New tasks get priority: {view.priority.value}")

    if view.celebrating:
        lines.extend(["", "  SYSTEM LOG :: STATUS: COMPLETE :: GOAL ACHIEVED"])
    return "\n".join(lines)


def boot_progress(duration_ms: int = 2500, interval_ms: int = 50) -> Iterator[int]:
    """
    Deterministic start-up progress: one value per tick, ending at exactly 100.

    Increment per tick is 100 / (duration / interval), 2% with the defaults.
    """
    ticks = max(duration_ms // max(interval_ms, 1), 1)
    step = 100 / ticks
    value = 0.0
    while value < 100:
        yield round(value)
        value += step
    yield 100
