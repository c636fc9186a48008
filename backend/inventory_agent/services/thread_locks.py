"""Per-thread mutual exclusion for conversation turns."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator
from weakref import WeakValueDictionary


class ThreadLockRegistry:
    """Hands out one ``asyncio.Lock`` per conversation thread.

    Turns on the same thread run one after another inside this process so a
    turn always starts from the checkpoint its predecessor wrote. Locks are
    dropped once no turn holds or waits on them.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def _lock_for(self, thread_id: str) -> asyncio.Lock:
        lock = self._locks.get(thread_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[thread_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, thread_id: str) -> AsyncIterator[None]:
        lock = self._lock_for(thread_id)
        async with lock:
            yield

