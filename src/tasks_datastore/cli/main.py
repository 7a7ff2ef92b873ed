# src/tasks_datastore/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console screen until
/exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        await run_console_loop(state)
    finally:
        await state.view_model.close()


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(
        app_name=settings.app_name,
        log_dir=settings.data_dir,
        console_level=level_from_name(settings.log_level),
    )

    logger.info("Starting %s (log: %s)...", settings.app_name, log_file)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
