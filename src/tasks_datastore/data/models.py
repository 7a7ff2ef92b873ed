# src/tasks_datastore/data/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum


class InvalidSortOrderError(ValueError):
    """A stored sort order is not a SortOrder member name (unrecoverable)."""


class TaskPriority(IntEnum):
    """Lower value sorts first."""

    HIGH = 0
    MEDIUM = 1
    LOW = 2


class SortOrder(Enum):
    """
    Two independent sort toggles (deadline, priority) collapsed into one value.

    Stored by member name.
    """

    NONE = "none"
    BY_DEADLINE = "by_deadline"
    BY_PRIORITY = "by_priority"
    BY_DEADLINE_AND_PRIORITY = "by_deadline_and_priority"

    @property
    def deadline_on(self) -> bool:
        return self in (SortOrder.BY_DEADLINE, SortOrder.BY_DEADLINE_AND_PRIORITY)

    @property
    def priority_on(self) -> bool:
        return self in (SortOrder.BY_PRIORITY, SortOrder.BY_DEADLINE_AND_PRIORITY)

    @classmethod
    def from_axes(cls, deadline_on: bool, priority_on: bool) -> SortOrder:
        if deadline_on and priority_on:
            return cls.BY_DEADLINE_AND_PRIORITY
        if deadline_on:
            return cls.BY_DEADLINE
        if priority_on:
            return cls.BY_PRIORITY
        return cls.NONE

    def with_deadline(self, checked: bool) -> SortOrder:
        return SortOrder.from_axes(checked, self.priority_on)

    def with_priority(self, checked: bool) -> SortOrder:
        return SortOrder.from_axes(self.deadline_on, checked)

    @classmethod
    def from_stored(cls, raw: str | None) -> SortOrder:
        if raw is None:
            return cls.NONE
        if not isinstance(raw, str):
            raise InvalidSortOrderError(f"Unknown sort order: {raw!r}")
        try:
            return cls[raw]
        except KeyError:
            raise InvalidSortOrderError(f"Unknown sort order: {raw!r}") from None


@dataclass(frozen=True, slots=True)
class Task:
    name: str
    deadline: datetime
    priority: TaskPriority
    completed: bool = False


@dataclass(frozen=True, slots=True)
class UserPreferences:
    show_completed: bool = False
    sort_order: SortOrder = SortOrder.NONE
