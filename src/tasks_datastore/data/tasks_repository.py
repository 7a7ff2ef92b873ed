# src/tasks_datastore/data/tasks_repository.py

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable
from dataclasses import replace
from datetime import datetime

from ..core.flow import StateFlow
from .models import Task, TaskPriority

logger = logging.getLogger(__name__)


SAMPLE_TASKS: tuple[Task, ...] = (
    Task(name="Open codelab", deadline=datetime(2020, 7, 3), priority=TaskPriority.LOW),
    Task(
        name="Import project",
        deadline=datetime(2020, 7, 3),
        priority=TaskPriority.MEDIUM,
        completed=True,
    ),
    Task(
        name="Check out the code",
        deadline=datetime(2020, 7, 4),
        priority=TaskPriority.LOW,
    ),
    Task(
        name="Read about DataStore",
        deadline=datetime(2020, 7, 6),
        priority=TaskPriority.HIGH,
    ),
    Task(
        name="Implement each step",
        deadline=datetime(2020, 7, 7),
        priority=TaskPriority.MEDIUM,
    ),
    Task(
        name="Understand how to use DataStore",
        deadline=datetime(2020, 7, 8),
        priority=TaskPriority.HIGH,
    ),
    Task(
        name="Understand how to migrate to DataStore",
        deadline=datetime(2020, 7, 8),
        priority=TaskPriority.HIGH,
    ),
)


class TasksRepository:
    """
    In-memory task source.

    tasks() emits the current snapshot first, then a new one after every change.
    """

    def __init__(self, tasks: Iterable[Task] = SAMPLE_TASKS) -> None:
        self._state: StateFlow[tuple[Task, ...]] = StateFlow(tuple(tasks))

    @property
    def current(self) -> tuple[Task, ...]:
        return self._state.value

    async def tasks(self) -> AsyncIterator[tuple[Task, ...]]:
        async for snapshot in self._state:
            yield snapshot

    def replace_tasks(self, tasks: Iterable[Task]) -> None:
        self._state.set(tuple(tasks))

    def add_task(self, task: Task) -> None:
        if not task.name.strip():
            raise ValueError("name is required")
        self._state.set(self._state.value + (task,))
        logger.info("Task added: %s", task.name)

    def set_completed(self, name: str, completed: bool = True) -> Task:
        """Mark the first task called `name` (raises KeyError if there is none)."""
        tasks = list(self._state.value)
        for i, task in enumerate(tasks):
            if task.name == name:
                tasks[i] = replace(task, completed=completed)
                self._state.set(tuple(tasks))
                logger.info("Task %r completed=%s", name, completed)
                return tasks[i]
        raise KeyError(name)
