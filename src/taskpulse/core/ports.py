# src/taskpulse/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and audio output swappable and makes testing easier.
"""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..audio.voices import Voice


class KeyValueStore(Protocol):
    """
    String-by-key persistence (the local key-value store the task list lives in).

    Implementations report failures instead of raising:
    - read_string returns None when the key is absent or unreadable
    - write_string returns False when the value could not be stored
    """

    def read_string(self, key: str) -> str | None: ...
    def write_string(self, key: str, value: str) -> bool: ...


class AudioBackend(Protocol):
    """Output device side of the synthesizer: accepts voices, never blocks the caller."""

    def schedule(self, voices: Sequence[Voice]) -> None: ...
    def close(self) -> None: ...


AudioBackendFactory = Callable[[], AudioBackend]


class FeedbackPlayer(Protocol):
    """What the controller needs from the synthesizer."""

    def play_click(self) -> None: ...
    def play_add(self) -> None: ...
    def play_toggle(self, now_completed: bool) -> None: ...
    def play_delete(self) -> None: ...
    def play_victory(self) -> None: ...
    def play_credits(self) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


# delay in seconds, callback -> handle
Scheduler = Callable[[float, Callable[[], None]], TimerHandle]
