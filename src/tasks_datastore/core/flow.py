# src/tasks_datastore/core/flow.py

from __future__ import annotations

"""
Reactive primitives built on asyncio.

A "flow" here is any async iterable. Cold flows are async generator functions
(each call starts a fresh collection); StateFlow is a hot, conflated holder of
the latest value that any number of collectors can follow.
"""

import asyncio
from collections.abc import AsyncIterable, AsyncIterator, Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")
A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")

_UNSET = object()
_DONE = object()


class StateFlow(Generic[T]):
    """
    Latest-value holder.

    Collectors get the current value first, then every later version. A slow
    collector skips intermediate versions and only sees the newest one.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._version = 0
        self._changed = asyncio.Event()

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._version += 1
        # Wake everyone waiting on the current event, then arm a fresh one.
        self._changed.set()
        self._changed = asyncio.Event()

    async def __aiter__(self) -> AsyncIterator[T]:
        seen = -1
        while True:
            if self._version == seen:
                await self._changed.wait()
                continue
            seen = self._version
            yield self._value


async def _pump(index: int, source: AsyncIterable[Any], queue: asyncio.Queue) -> None:
    try:
        async for item in source:
            await queue.put((index, item, None))
    except Exception as e:
        await queue.put((index, None, e))
        return
    await queue.put((index, _DONE, None))


async def combine_latest(
        first: AsyncIterable[A],
        second: AsyncIterable[B],
        transform: Callable[[A, B], R],
) -> AsyncIterator[R]:
    """
    Combine two flows.

    Nothing is emitted until both flows produced a value. After that, every
    emission of either flow yields transform(latest_first, latest_second).
    The first error from either flow is re-raised here. Completes when both
    flows complete.
    """
    queue: asyncio.Queue = asyncio.Queue()
    pumps = [
        asyncio.create_task(_pump(0, first, queue)),
        asyncio.create_task(_pump(1, second, queue)),
    ]
    latest: list[Any] = [_UNSET, _UNSET]
    running = 2

    try:
        while running:
            index, item, error = await queue.get()
            if error is not None:
                raise error
            if item is _DONE:
                running -= 1
                continue
            latest[index] = item
            if latest[0] is _UNSET or latest[1] is _UNSET:
                continue
            yield transform(latest[0], latest[1])
    finally:
        for task in pumps:
            task.cancel()
        await asyncio.gather(*pumps, return_exceptions=True)
