"""Shared concurrency primitives for the review engine.

Two patterns are exposed:

1. **KeyedLock** -- one ``asyncio.Lock`` per key (a review item's
   ``content_id``).  Transitions on the same item are serialized while
   transitions on different items never contend.  Locks are created on
   demand and discarded once nobody holds or waits on them, so the index
   does not grow with the size of the queue.

2. **chunked / gather_settled** -- the wave pattern used by bulk
   operations: split ids into fixed-size chunks, run each chunk fully
   concurrently, and collect results and exceptions side by side so one
   failure never cancels its siblings.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Sequence
from contextlib import asynccontextmanager
from typing import TypeVar

_T = TypeVar("_T")


class KeyedLock:
    """Per-key mutual exclusion for async transitions."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        # Holders plus waiters per key; the lock is dropped at zero.
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for *key* for the duration of the ``async with`` block.

        The lock is released on every exit path, including exceptions
        and cancellation while waiting.
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def locked(self, key: str) -> bool:
        """Return True if some transition currently holds *key*."""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


def chunked(items: Sequence[_T], size: int) -> list[list[_T]]:
    """Split *items* into ordered chunks of at most *size* elements.

    Raises:
        ValueError: If *size* is less than 1.
    """
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def gather_settled(coros: Sequence[Awaitable[_T]]) -> list[_T | BaseException]:
    """Run awaitables concurrently and return results and exceptions in order.

    Mirrors ``asyncio.gather(..., return_exceptions=True)``: a failing
    awaitable contributes its exception to the result list instead of
    cancelling the others.
    """
    return await asyncio.gather(*coros, return_exceptions=True)
