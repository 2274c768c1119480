# src/taskpulse/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

# Console minimum level per logger prefix. Both entries log from background
# threads (audio stream callback, effect timers) while the board is on screen.
CONSOLE_FLOORS: dict[str, int] = {
    "taskpulse.audio.backend": logging.WARNING,
    "taskpulse.effects": logging.WARNING,
}

# Logger levels applied at setup; they bound the file log as well.
MODULE_LEVELS: dict[str, int] = {
    "taskpulse.effects": logging.INFO,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - taskpulse logs pass, except prefixes listed in `floors` below their level
    - Python warnings (captured as 'py.warnings') and third-party logs need ERROR+
    """

    def __init__(self, floors: Mapping[str, int] | None = None) -> None:
        super().__init__()
        # longest prefix first so nested loggers pick the most specific rule
        items = (CONSOLE_FLOORS if floors is None else floors).items()
        self._floors = sorted(items, key=lambda kv: len(kv[0]), reverse=True)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "taskpulse" or name.startswith("taskpulse."):
            for prefix, level in self._floors:
                if name == prefix or name.startswith(prefix + "."):
                    return record.levelno >= level
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpulse",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    module_levels: Mapping[str, int] | None = None,
) -> Path:
    """
    Configure logging with:
    - Console handler: filtered, so log lines do not bury the task list
    - File handler: full logs (with thread names) for debugging

    Call this ONCE, very early (before first logger.info). Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskpulse.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    console_fmt = logging.Formatter(fmt="%(levelname)s %(name)s: %(message)s")
    file_fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(console_fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(file_fmt)
    root.addHandler(fh)

    for name, level in (MODULE_LEVELS if module_levels is None else module_levels).items():
        logging.getLogger(name).setLevel(level)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
    return log_file
