# src/tasks_datastore/ui/lifecycle.py

from __future__ import annotations

"""
Lifecycle-aware observation.

LifecycleScope is an explicit token for "this consumer is visible": it is passed
to LiveStream.observe() instead of relying on global lifecycle hooks.

LiveStream keeps one collection of a cold flow running while at least one
observing scope is active, remembers the latest value and hands it to scopes
as they become active. When every scope is stopped, the collection is
cancelled after a grace period; reactivating within it keeps the collection.

All methods must be called from the event loop thread.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

ScopeListener = Callable[["LifecycleScope"], None]

_UNSET: Any = object()


class LifecycleScope:
    def __init__(self, name: str = "scope") -> None:
        self.name = name
        self._active = False
        self._destroyed = False
        self._listeners: list[ScopeListener] = []

    def __repr__(self) -> str:
        return f"LifecycleScope({self.name!r}, active={self._active}, destroyed={self._destroyed})"

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def add_listener(self, listener: ScopeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ScopeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def start(self) -> None:
        if self._destroyed:
            raise RuntimeError(f"{self.name} is destroyed")
        if self._active:
            return
        self._active = True
        self._notify()

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self._notify()

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._active = False
        self._destroyed = True
        self._notify()
        self._listeners.clear()


@dataclass(slots=True)
class _Observation(Generic[T]):
    observer: Callable[[T], None]
    seen_version: int = -1


class LiveStream(Generic[T]):
    """Latest value of a cold flow, delivered to observers of active scopes."""

    def __init__(
        self,
        source: Callable[[], AsyncIterator[T]],
        *,
        timeout_seconds: float = 5.0,
        name: str = "live",
    ) -> None:
        self._source = source
        self._timeout = max(0.0, float(timeout_seconds))
        self._name = name
        self._observations: dict[LifecycleScope, _Observation[T]] = {}
        self._value: T = _UNSET
        self._version = 0
        self._collector: asyncio.Task[None] | None = None
        self._stop_handle: asyncio.TimerHandle | None = None
        self._completed = False
        self._error: Exception | None = None

    @property
    def value(self) -> T | None:
        return None if self._value is _UNSET else self._value

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET

    @property
    def error(self) -> Exception | None:
        """Error that ended the last collection, if any."""
        return self._error

    @property
    def is_collecting(self) -> bool:
        return self._collector is not None and not self._collector.done()

    # ---- observers ----

    def observe(self, scope: LifecycleScope, observer: Callable[[T], None]) -> None:
        """
        Subscribe `observer` for as long as `scope` lives.

        Observing the same scope again replaces its observer.
        """
        if scope.is_destroyed:
            return
        if scope not in self._observations:
            scope.add_listener(self._on_scope_changed)
        self._observations[scope] = _Observation(observer)
        self._on_scope_changed(scope)

    def remove_observers(self, scope: LifecycleScope) -> None:
        if self._observations.pop(scope, None) is None:
            return
        scope.remove_listener(self._on_scope_changed)
        self._update_collection()

    def _on_scope_changed(self, scope: LifecycleScope) -> None:
        if scope.is_destroyed:
            self.remove_observers(scope)
            return
        if scope.is_active:
            self._dispatch(self._observations[scope])
        self._update_collection()

    def _active_count(self) -> int:
        return sum(1 for scope in self._observations if scope.is_active)

    def _dispatch(self, observation: _Observation[T]) -> None:
        if self._value is _UNSET or observation.seen_version == self._version:
            return
        observation.seen_version = self._version
        try:
            observation.observer(self._value)
        except Exception:
            # Other scopes keep receiving values.
            logger.exception("LiveStream %s: observer failed", self._name)

    # ---- collection ----

    def _update_collection(self) -> None:
        loop = asyncio.get_running_loop()

        if self._active_count() > 0:
            if self._stop_handle is not None:
                self._stop_handle.cancel()
                self._stop_handle = None
            if not self.is_collecting and not self._completed:
                self._collector = loop.create_task(self._collect(), name=f"live:{self._name}")
            return

        if not self.is_collecting or self._stop_handle is not None:
            return
        if self._timeout == 0:
            self._cancel_collection()
        else:
            self._stop_handle = loop.call_later(self._timeout, self._cancel_collection)

    def _cancel_collection(self) -> None:
        self._stop_handle = None
        if self._collector is not None:
            self._collector.cancel()
            self._collector = None
            logger.debug("LiveStream %s: collection cancelled", self._name)

    async def _collect(self) -> None:
        self._error = None
        try:
            async for value in self._source():
                self._set_value(value)
        except Exception as e:
            self._error = e
            logger.exception("LiveStream %s: source failed", self._name)
            return
        self._completed = True

    def _set_value(self, value: T) -> None:
        self._value = value
        self._version += 1
        for scope, observation in list(self._observations.items()):
            if scope.is_active:
                self._dispatch(observation)

    async def aclose(self) -> None:
        """Cancel any running collection and wait for it to finish."""
        if self._stop_handle is not None:
            self._stop_handle.cancel()
            self._stop_handle = None
        collector, self._collector = self._collector, None
        if collector is None:
            return
        collector.cancel()
        await asyncio.gather(collector, return_exceptions=True)
