# src/taskglitch/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs the one-shot initial load, then
starts the console REPL (or prints a metrics summary when the console is disabled).
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, load_initial_tasks
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    # keep noisy libs readable
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)
    load_initial_tasks(state)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled. Printing a summary and exiting.")
            print(command_registry.handle(state, "/status"))
            print(command_registry.handle(state, "/metrics"))
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
