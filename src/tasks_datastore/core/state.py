# src/tasks_datastore/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..data.datastore import PreferencesDataStore
from ..data.tasks_repository import TasksRepository
from ..data.user_preferences import UserPreferencesRepository
from ..ui.tasks_view_model import TasksViewModel


@dataclass
class AppState:
    # Settings object (config.Settings or a test double with the same attributes).
    settings: object

    tasks_repository: TasksRepository
    preferences_store: PreferencesDataStore
    user_preferences: UserPreferencesRepository
    view_model: TasksViewModel
