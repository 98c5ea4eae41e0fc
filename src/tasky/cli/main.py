# src/tasky/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the task file), then runs the
console loop in the main thread.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_errors import PersistenceError

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (tasks file: %s)...", settings.app_name, settings.tasks_path)

    try:
        state = create_initial_state(settings=settings)
    except PersistenceError as e:
        # A corrupt file must not be replaced by an empty list on the next write.
        logger.error("Cannot load tasks: %s", e)
        print(f"Cannot start: {e}", file=sys.stderr)
        print("Fix or move the file away and start again.", file=sys.stderr)
        return 1

    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
