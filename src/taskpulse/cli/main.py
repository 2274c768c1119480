# src/taskpulse/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, plays the boot sequence, then runs the
console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_boot_sequence, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # TaskStore writes through on every change; nothing to flush.
    try:
        effects = getattr(state, "effects", None)
        if effects is not None:
            effects.close()
    except Exception:
        logger.debug("Effects close failed.", exc_info=True)

    try:
        synth = getattr(state, "synth", None)
        if synth is not None:
            synth.close()
    except Exception:
        logger.debug("Audio shutdown failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    file_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, file_level=file_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        if settings.boot_animation:
            run_boot_sequence(settings.app_name)
        run_console_loop(state)
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
