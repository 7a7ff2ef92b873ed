# src/tasks_datastore/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the task source, preferences store and view model into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..data.datastore import LegacyPreferencesMigration, PreferencesDataStore
from ..data.tasks_repository import TasksRepository
from ..data.user_preferences import MIGRATED_KEYS, UserPreferencesRepository
from ..ui.tasks_view_model import TasksViewModel, TasksViewModelFactory

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.preferences_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    tasks_repository = TasksRepository() if settings.seed_sample_tasks else TasksRepository(())
    preferences_store = PreferencesDataStore(
        settings.preferences_db_path,
        migrations=[LegacyPreferencesMigration(settings.legacy_preferences_path, MIGRATED_KEYS)],
    )
    user_preferences = UserPreferencesRepository(preferences_store)

    factory = TasksViewModelFactory(
        tasks_repository,
        user_preferences,
        live_timeout_seconds=settings.live_data_timeout_seconds,
    )

    logger.debug("AppState wired (tasks=%d)", len(tasks_repository.current))
    return AppState(
        settings=settings,
        tasks_repository=tasks_repository,
        preferences_store=preferences_store,
        user_preferences=user_preferences,
        view_model=factory.create(TasksViewModel),
    )
