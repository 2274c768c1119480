# src/taskpulse/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.render import boot_progress, render_view
from ..core.state import AppState
from ..effects.board import CELEBRATE_DELAY_SECONDS

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _clear_screen() -> None:
    if sys.stdout.isatty():
        print("\033[H\033[2J", end="", flush=True)


def run_boot_sequence(app_name: str, *, interval_ms: int = 50) -> None:
    """Cosmetic start-up progress line. Best-effort: plain output if not a TTY."""
    if not sys.stdout.isatty():
        print(f"{app_name}: loading... 100%")
        return
    for pct in boot_progress(interval_ms=interval_ms):
        sys.stdout.write(f"\r{app_name}: loading... {pct:>3}%")
        sys.stdout.flush()
        time.sleep(interval_ms / 1000)
    sys.stdout.write("\n")
    sys.stdout.flush()


def handle_line(state: AppState, line: str) -> str | None:
    """
    One console input -> one reply.

    Any input dismisses a celebration overlay that is still showing.
    Slash commands go to the registry; anything else is a new task.
    """
    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    if state.effects.celebrating:
        state.effects.dismiss()

    if line.startswith("/"):
        try:
            return command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            return "Internal error while handling a command."

    task = state.controller.add(line)
    if task is None:
        return None
    return f"Added: {task.text} ({task.priority.value})."


def await_celebration(state: AppState, *, sleep: Callable[[float], None] = time.sleep) -> bool:
    """
    After a burst, wait until the celebration overlay is up so the next
    redraw shows it. Returns True when there was a burst to wait for.
    """
    if not state.effects.impact or state.effects.celebrating:
        return False
    sleep(CELEBRATE_DELAY_SECONDS + 0.1)
    return True


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (sound=%s).", state.sound_enabled)
    reply: str | None = "Type a task to add it. Use /help for commands. Use /exit to quit."

    while True:
        _clear_screen()
        print(render_view(state.controller.view()))
        if reply:
            print()
            _print_ts(reply)

        try:
            user_input = input("\n> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            reply = None
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        await_celebration(state)

    logger.info("Console connector finished.")
