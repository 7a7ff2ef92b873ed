# src/tasks_datastore/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..ui.tasks_view_model import TasksUiModel

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /list, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
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

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_ui_model(model: TasksUiModel) -> str:
    lines = [
        f"Tasks (show completed: {'ON' if model.show_completed else 'OFF'}, "
        f"deadline: {'ON' if model.sort_order.deadline_on else 'OFF'}, "
        f"priority: {'ON' if model.sort_order.priority_on else 'OFF'})"
    ]
    if not model.tasks:
        lines.append("  (no tasks)")
    for t in model.tasks:
        mark = "x" if t.completed else " "
        lines.append(f"  [{mark}] {t.deadline:%Y-%m-%d}  {t.priority.name:<6}  {t.name}")
    return "\n".join(lines)


def _parse_switch(args: list[str]) -> bool | None:
    if not args:
        return None
    arg = args[0].lower()
    if arg in _ON:
        return True
    if arg in _OFF:
        return False
    return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    model = state.view_model.tasks_ui_model.value
    if model is None:
        return "Tasks are still loading."
    return render_ui_model(model)


def cmd_completed(state: AppState, args: list[str]) -> str:
    """
    /completed on   -> show completed tasks
    /completed off  -> hide completed tasks
    """
    value = _parse_switch(args)
    if value is None:
        return "Usage: /completed on | /completed off."
    state.view_model.show_completed_tasks(value)
    return f"Show completed: {'ON' if value else 'OFF'}."


def cmd_deadline(state: AppState, args: list[str]) -> str:
    value = _parse_switch(args)
    if value is None:
        return "Usage: /deadline on | /deadline off."
    state.view_model.enable_sort_by_deadline(value)
    return f"Sort by deadline: {'ON' if value else 'OFF'}."


def cmd_priority(state: AppState, args: list[str]) -> str:
    value = _parse_switch(args)
    if value is None:
        return "Usage: /priority on | /priority off."
    state.view_model.enable_sort_by_priority(value)
    return f"Sort by priority: {'ON' if value else 'OFF'}."


def cmd_done(state: AppState, args: list[str]) -> str:
    """/done <task name> -> mark the task as completed"""
    name = " ".join(args).strip()
    if not name:
        return "Usage: /done <task name>."
    try:
        state.tasks_repository.set_completed(name)
    except KeyError:
        return f"No task named {name!r}."
    return f"Marked {name!r} as completed."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the current task list.", aliases=["ls"])
registry.register(
    "completed", cmd_completed, help_text="Show/hide completed tasks: /completed on | off."
)
registry.register("deadline", cmd_deadline, help_text="Sort by deadline: /deadline on | off.")
registry.register("priority", cmd_priority, help_text="Sort by priority: /priority on | off.")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <task name>.")
