# src/tasks_datastore/data/user_preferences.py

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from ..core.ports import PreferencesStore
from .datastore import (
    MutablePreferences,
    Preferences,
    PreferencesKey,
    StorageReadError,
    empty_preferences,
)
from .models import SortOrder, UserPreferences

logger = logging.getLogger(__name__)

SHOW_COMPLETED: PreferencesKey[bool] = PreferencesKey("show_completed", bool)
# Same name the legacy JSON preferences used, so the migration carries it over as-is.
SORT_ORDER: PreferencesKey[str] = PreferencesKey("sort_order", str)

MIGRATED_KEYS = (SHOW_COMPLETED, SORT_ORDER)


def _current_sort_order(prefs: Preferences) -> SortOrder:
    return SortOrder.from_stored(prefs.get(SORT_ORDER))


def to_user_preferences(prefs: Preferences) -> UserPreferences:
    """Missing keys read as defaults; an unknown sort order raises InvalidSortOrderError."""
    show_completed = prefs.get(SHOW_COMPLETED, False)
    if not isinstance(show_completed, bool):
        logger.warning("Ignoring non-boolean show_completed=%r", show_completed)
        show_completed = False
    return UserPreferences(
        show_completed=show_completed,
        sort_order=_current_sort_order(prefs),
    )


class UserPreferencesRepository:
    """Saves and reads the task list preferences (filter + sort order)."""

    def __init__(self, store: PreferencesStore) -> None:
        self._store = store

    async def _data_or_empty(self) -> AsyncIterator[Preferences]:
        try:
            async for prefs in self._store.data():
                yield prefs
        except StorageReadError:
            logger.warning("Reading preferences failed; using defaults.", exc_info=True)
            yield empty_preferences()

    async def user_preferences(self) -> AsyncIterator[UserPreferences]:
        async for prefs in self._data_or_empty():
            yield to_user_preferences(prefs)

    async def update_show_completed(self, show_completed: bool) -> UserPreferences:
        def transform(prefs: MutablePreferences) -> None:
            prefs[SHOW_COMPLETED] = bool(show_completed)

        return to_user_preferences(await self._store.edit(transform))

    async def enable_sort_by_deadline(self, checked: bool) -> UserPreferences:
        def transform(prefs: MutablePreferences) -> None:
            new_order = _current_sort_order(prefs).with_deadline(checked)
            prefs[SORT_ORDER] = new_order.name

        updated = to_user_preferences(await self._store.edit(transform))
        logger.debug("Sort by deadline=%s -> %s", checked, updated.sort_order.name)
        return updated

    async def enable_sort_by_priority(self, checked: bool) -> UserPreferences:
        def transform(prefs: MutablePreferences) -> None:
            new_order = _current_sort_order(prefs).with_priority(checked)
            prefs[SORT_ORDER] = new_order.name

        updated = to_user_preferences(await self._store.edit(transform))
        logger.debug("Sort by priority=%s -> %s", checked, updated.sort_order.name)
        return updated
