# tests/test_tasks_repository.py

from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from tasks_datastore.data.models import Task, TaskPriority
from tasks_datastore.data.tasks_repository import SAMPLE_TASKS, TasksRepository

from .fakes import take


def test_seeded_with_sample_tasks() -> None:
    repo = TasksRepository()
    assert repo.current == SAMPLE_TASKS
    assert any(t.completed for t in repo.current)


@pytest.mark.asyncio
async def test_tasks_emits_snapshot_then_changes(tasks_repository: TasksRepository) -> None:
    flow = tasks_repository.tasks()
    first = await asyncio.wait_for(flow.__anext__(), 1.0)
    assert len(first) == 5

    tasks_repository.add_task(Task("new", datetime(2024, 4, 1), TaskPriority.LOW))
    second = await asyncio.wait_for(flow.__anext__(), 1.0)
    assert [t.name for t in second][-1] == "new"
    # Snapshots are immutable; the earlier one is untouched.
    assert len(first) == 5
    await flow.aclose()


@pytest.mark.asyncio
async def test_set_completed(tasks_repository: TasksRepository) -> None:
    updated = tasks_repository.set_completed("write report")
    assert updated.completed is True

    [snapshot] = await take(tasks_repository.tasks(), 1)
    assert next(t for t in snapshot if t.name == "write report").completed is True

    with pytest.raises(KeyError):
        tasks_repository.set_completed("no such task")


def test_add_task_requires_name(tasks_repository: TasksRepository) -> None:
    with pytest.raises(ValueError):
        tasks_repository.add_task(Task("  ", datetime(2024, 1, 1), TaskPriority.HIGH))


def test_replace_tasks(tasks_repository: TasksRepository) -> None:
    tasks_repository.replace_tasks([])
    assert tasks_repository.current == ()
