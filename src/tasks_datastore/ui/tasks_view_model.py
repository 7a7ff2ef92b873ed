# src/tasks_datastore/ui/tasks_view_model.py

from __future__ import annotations

"""
Tasks view model.

Combines the task list with the stored user preferences into a TasksUiModel
(tasks filtered and sorted for display, plus the flags the toggles show).
Every time the task list or the preferences emit, the UI model is rebuilt.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..core.flow import combine_latest
from ..core.ports import TaskSource, UserPreferencesSource
from ..data.models import SortOrder, Task, UserPreferences
from .lifecycle import LiveStream

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TasksUiModel:
    tasks: tuple[Task, ...]
    show_completed: bool
    sort_order: SortOrder


def filter_sort_tasks(
        tasks: Iterable[Task],
        show_completed: bool,
        sort_order: SortOrder,
) -> list[Task]:
    filtered = list(tasks) if show_completed else [t for t in tasks if not t.completed]

    # list.sort is stable (reverse=True included), so a secondary key sorted
    # first survives as the tie-break of the primary one.
    if sort_order.priority_on:
        filtered.sort(key=lambda t: t.priority)
    if sort_order.deadline_on:
        filtered.sort(key=lambda t: t.deadline, reverse=True)
    return filtered


def derive_ui_model(tasks: Sequence[Task], prefs: UserPreferences) -> TasksUiModel:
    return TasksUiModel(
        tasks=tuple(filter_sort_tasks(tasks, prefs.show_completed, prefs.sort_order)),
        show_completed=prefs.show_completed,
        sort_order=prefs.sort_order,
    )


class TasksViewModel:
    def __init__(
            self,
            repository: TaskSource,
            user_preferences_repository: UserPreferencesSource,
            *,
            live_timeout_seconds: float = 5.0,
    ) -> None:
        self._repository = repository
        self._user_preferences_repository = user_preferences_repository
        self._jobs: set[asyncio.Task[Any]] = set()
        self._closed = False

        # Only delivered while an observing scope is active.
        self.tasks_ui_model: LiveStream[TasksUiModel] = LiveStream(
            self.tasks_ui_model_flow,
            timeout_seconds=live_timeout_seconds,
            name="tasks_ui_model",
        )

    def tasks_ui_model_flow(self) -> AsyncIterator[TasksUiModel]:
        return combine_latest(
            self._repository.tasks(),
            self._user_preferences_repository.user_preferences(),
            derive_ui_model,
        )

    # ---- intents ----

    def _launch(self, name: str, action: Callable[[], Awaitable[Any]]) -> asyncio.Task[Any]:
        if self._closed:
            raise RuntimeError("TasksViewModel is closed")

        async def run() -> Any:
            return await action()

        job = asyncio.get_running_loop().create_task(run(), name=name)
        self._jobs.add(job)
        job.add_done_callback(self._on_job_done)
        return job

    def _on_job_done(self, job: asyncio.Task[Any]) -> None:
        self._jobs.discard(job)
        if job.cancelled():
            return
        err = job.exception()
        if err is not None:
            logger.error("%s failed", job.get_name(), exc_info=err)

    def show_completed_tasks(self, show_completed: bool) -> asyncio.Task[Any]:
        return self._launch(
            "show_completed_tasks",
            lambda: self._user_preferences_repository.update_show_completed(show_completed),
        )

    def enable_sort_by_deadline(self, checked: bool) -> asyncio.Task[Any]:
        return self._launch(
            "enable_sort_by_deadline",
            lambda: self._user_preferences_repository.enable_sort_by_deadline(checked),
        )

    def enable_sort_by_priority(self, checked: bool) -> asyncio.Task[Any]:
        return self._launch(
            "enable_sort_by_priority",
            lambda: self._user_preferences_repository.enable_sort_by_priority(checked),
        )

    async def close(self) -> None:
        """Cancel in-flight intents and stop observing (the screen is gone for good)."""
        self._closed = True
        jobs = list(self._jobs)
        for job in jobs:
            job.cancel()
        await asyncio.gather(*jobs, return_exceptions=True)
        await self.tasks_ui_model.aclose()


class TasksViewModelFactory:
    def __init__(
            self,
            repository: TaskSource,
            user_preferences_repository: UserPreferencesSource,
            *,
            live_timeout_seconds: float = 5.0,
    ) -> None:
        self._repository = repository
        self._user_preferences_repository = user_preferences_repository
        self._live_timeout_seconds = live_timeout_seconds

    def create(self, model_cls: type) -> TasksViewModel:
        if isinstance(model_cls, type) and issubclass(model_cls, TasksViewModel):
            return model_cls(
                self._repository,
                self._user_preferences_repository,
                live_timeout_seconds=self._live_timeout_seconds,
            )
        raise ValueError("Unknown ViewModel class")
