# src/tasks_datastore/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_ui_model
from ..core.state import AppState
from ..ui.lifecycle import LifecycleScope
from ..ui.tasks_view_model import TasksUiModel

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def run_console_loop(state: AppState) -> None:
    """
    Interactive console screen.

    The screen is "visible" for as long as this loop runs: its scope is started
    here and destroyed on exit, which unsubscribes it from the UI model.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    scope = LifecycleScope("console")

    def on_model(model: TasksUiModel) -> None:
        _print_ts(render_ui_model(model))

    state.view_model.tasks_ui_model.observe(scope, on_model)
    scope.start()

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                cmd_response = command_registry.handle(state, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is None:
                cmd_response = "Commands start with '/'. Use /help to list them."
            _print_ts(cmd_response)
            # Let intents and the UI model catch up before the next prompt.
            await asyncio.sleep(0.05)
    finally:
        scope.destroy()
        logger.info("Console connector finished.")
