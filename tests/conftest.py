# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from tasks_datastore.data.datastore import PreferencesDataStore
from tasks_datastore.data.models import Task, TaskPriority
from tasks_datastore.data.tasks_repository import TasksRepository
from tasks_datastore.data.user_preferences import UserPreferencesRepository


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with cli.bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasks-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        preferences_db_path=tmp_path / "user_preferences.sqlite3",
        legacy_preferences_path=tmp_path / "user_preferences.json",
        # Stop collecting as soon as nothing observes (no grace period in tests).
        live_data_timeout_seconds=0.0,
        seed_sample_tasks=True,
    )


@pytest.fixture()
def store(tmp_path: Path) -> PreferencesDataStore:
    return PreferencesDataStore(tmp_path / "prefs.sqlite3")


@pytest.fixture()
def user_preferences(store: PreferencesDataStore) -> UserPreferencesRepository:
    return UserPreferencesRepository(store)


@pytest.fixture()
def tasks() -> list[Task]:
    return [
        Task("write report", datetime(2024, 3, 1), TaskPriority.MEDIUM),
        Task("pay rent", datetime(2024, 3, 5), TaskPriority.HIGH, completed=True),
        Task("book flights", datetime(2024, 3, 5), TaskPriority.LOW),
        Task("call plumber", datetime(2024, 2, 20), TaskPriority.HIGH),
        Task("renew passport", datetime(2024, 3, 5), TaskPriority.HIGH),
    ]


@pytest.fixture()
def tasks_repository(tasks: list[Task]) -> TasksRepository:
    return TasksRepository(tasks)
