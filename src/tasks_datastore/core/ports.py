# src/tasks_datastore/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the view model and the preferences store.

The view model depends on Protocols instead of concrete repositories.
This keeps storage swappable and makes testing with in-memory fakes easy.
"""

from collections.abc import AsyncIterator, Callable, Sequence
from typing import TYPE_CHECKING, Any, Awaitable, Protocol

if TYPE_CHECKING:
    from ..data.datastore import MutablePreferences, Preferences
    from ..data.models import Task, UserPreferences


class TaskSource(Protocol):
    """Emits full task-list snapshots, starting with the current one."""
    def tasks(self) -> AsyncIterator[Sequence[Task]]: ...


class PreferencesStore(Protocol):
    """Key-value store with a snapshot stream and atomic edits."""
    def data(self) -> AsyncIterator[Preferences]: ...
    def edit(self, transform: Callable[[MutablePreferences], None]) -> Awaitable[Preferences]: ...


class UserPreferencesSource(Protocol):
    """
    Typed preferences as consumed by the view model.

    user_preferences() must emit the default snapshot instead of failing when
    the underlying storage cannot be read.
    """

    def user_preferences(self) -> AsyncIterator[UserPreferences]: ...
    def update_show_completed(self, show_completed: bool) -> Awaitable[Any]: ...
    def enable_sort_by_deadline(self, checked: bool) -> Awaitable[Any]: ...
    def enable_sort_by_priority(self, checked: bool) -> Awaitable[Any]: ...


class DataMigration(Protocol):
    """One-shot migration run by the preferences store on first access."""
    def should_migrate(self, current: Preferences) -> bool: ...
    def migrate(self, current: Preferences) -> Preferences: ...
    def cleanup(self) -> None: ...
