# src/taskpulse/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Priority, Task
from .render import render_view

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Plain text (no leading /) adds a task.")
        return "\n".join(lines)


registry = CommandRegistry()


def _task_at(state: AppState, raw: str) -> Task | None:
    """Resolve a 1-based list number as shown by /list."""
    try:
        n = int(raw)
    except ValueError:
        return None
    tasks = state.task_store.snapshot()
    if n < 1 or n > len(tasks):
        return None
    return tasks[n - 1]


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_view(state.controller.view())


def cmd_add(state: AppState, args: list[str]) -> str:
    text = " ".join(args)
    task = state.controller.add(text)
    if task is None:
        return "Nothing to add (empty task)."
    return f"Added: {task.text} ({task.priority.value})."


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done <n>  -> toggle completion of task number n
    """
    if not args:
        return "Usage: /done <number>."
    task = _task_at(state, args[0])
    if task is None:
        return f"No task #{args[0]}."
    completed = state.controller.toggle(task.id)
    if completed is None:
        return f"No task #{args[0]}."
    stats = state.controller.stats()
    msg = f"{'Completed' if completed else 'Reopened'}: {task.text}."
    if stats.is_victory:
        msg += " All tasks done! Use /celebrate to celebrate."
    return msg


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <number>."
    task = _task_at(state, args[0])
    if task is None:
        return f"No task #{args[0]}."
    state.controller.delete(task.id)
    return f"Deleted: {task.text}."


def cmd_move(state: AppState, args: list[str]) -> str:
    """
    /move <n> <pos>  -> move task number n to list position pos
    """
    if len(args) < 2:
        return "Usage: /move <number> <position>."
    task = _task_at(state, args[0])
    if task is None:
        return f"No task #{args[0]}."
    try:
        pos = int(args[1])
    except ValueError:
        return "Position must be a number."
    state.controller.move(task.id, pos - 1)
    return f"Moved: {task.text}."


def cmd_priority(state: AppState, args: list[str]) -> str:
    """
    /priority           -> cycle Low -> Medium -> High
    /priority <level>   -> set level (low/medium/high)
    """
    if not args:
        p = state.controller.cycle_priority()
        return f"Priority for new tasks: {p.value}."
    raw = args[0].lower()
    if not any(level.value.lower().startswith(raw) for level in Priority):
        return "Usage: /priority [low|medium|high]."
    p = state.controller.change_priority(raw)
    return f"Priority for new tasks: {p.value}."


def cmd_clear(state: AppState, args: list[str]) -> str:
    """
    /clear        -> clear finished tasks (only when every task is completed)
    /clear all    -> clear regardless
    """
    stats = state.controller.stats()
    force = bool(args) and args[0].lower() == "all"
    if stats.total == 0:
        return "Nothing to clear."
    if not stats.is_victory and not force:
        return f"{stats.total - stats.completed} task(s) still open. Use /clear all to remove everything."

    removed = state.controller.clear_all()
    if stats.is_victory:
        return f"Cleared {removed} finished task(s)."
    return "All tasks removed."


def cmd_celebrate(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /celebrate  -> replay the goal-achieved celebration (list stays as is)
    """
    if not state.controller.celebrate():
        stats = state.controller.stats()
        if stats.total == 0:
            return "Nothing to celebrate yet. Add a task first."
        return f"{stats.total - stats.completed} task(s) still open. Finish them to celebrate."
    if emit:
        emit("GOAL ACHIEVED")
    return "Goal achieved! Celebrating."


def cmd_sound(state: AppState, args: list[str]) -> str:
    """
    /sound        -> show status
    /sound on|off -> unmute / mute feedback sounds
    """
    if not args:
        return f"Sound is currently {'ON' if state.synth.enabled else 'OFF'}. Use /sound on or /sound off."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        state.synth.set_enabled(True)
        return "Sound enabled."
    if arg in ("off", "0", "false", "no"):
        state.synth.set_enabled(False)
        return "Sound muted."
    return "Usage: /sound on or /sound off."


def cmd_credits(state: AppState, args: list[str]) -> str:
    state.controller.credits()
    name = str(getattr(state.settings, "app_name", "taskpulse"))
    return f"{name}: a small task list with sound. Enjoy the chime."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.", aliases=["a"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["toggle", "t"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <n>.", aliases=["delete", "rm"])
registry.register("move", cmd_move, help_text="Reorder: /move <n> <position>.", aliases=["mv"])
registry.register(
    "priority", cmd_priority, help_text="Priority for new tasks: /priority [low|medium|high].", aliases=["p"]
)
registry.register("clear", cmd_clear, help_text="Clear finished tasks: /clear | /clear all.")
registry.register("celebrate", cmd_celebrate, help_text="Replay the goal-achieved celebration.", aliases=["party"])
registry.register("sound", cmd_sound, help_text="Mute/unmute feedback: /sound on | /sound off.")
registry.register("credits", cmd_credits, help_text="Play the credits chime.")
