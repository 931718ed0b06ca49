"""Singleflight deduplication for concurrent async calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """
    Deduplicate concurrent calls that share a key.

    The first caller for a key creates the task; callers arriving while it
    is in flight join it and receive the same result (or exception).

    Leak-proof and cancellation-safe:
    - Cleanup happens in the caller's finally block, not the task
    - Only removes the entry if it is still THIS task
    - Joiners shield the shared task so their cancellation doesn't propagate
    """

    def __init__(self, name: str):
        self._name = name
        self._tasks: dict[str, "asyncio.Task[T]"] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._tasks

    async def do(self, key: str, factory: Callable[[], Awaitable[T]]) -> tuple[T, bool]:
        """
        Run ``factory()`` once per in-flight key.

        Returns:
            Tuple of (result, joined) where joined is True if this caller
            awaited an existing in-flight task
        """
        # No await between lookup and insert, so this is atomic on the event loop
        task = self._tasks.get(key)
        joined = task is not None
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            logger.debug(f"{self._name}({key}): created singleflight task")
        else:
            logger.debug(f"{self._name}({key}): joining existing singleflight")

        try:
            if joined:
                result = await asyncio.shield(task)
            else:
                result = await task
            return result, joined
        finally:
            if self._tasks.get(key) is task:
                self._tasks.pop(key, None)
