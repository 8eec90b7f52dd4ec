# Area: Shared
"""
secret_poker._shared.locks — Per-key asyncio locks
==================================================

One asyncio.Lock per key (table id, sender address), created on first
use and dropped once nobody holds or waits for it, so the map stays as
large as the set of keys currently in use.
"""

from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable
import asyncio


class KeyedLocks:
    """Map of asyncio locks keyed by table id or sender address."""

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._locks

    def locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for ``key``; callers for the same key queue in order."""
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        # Waiters count as users, so a lock is never dropped under a queued caller
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]
