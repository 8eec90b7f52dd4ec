# Area: Tracker
"""
secret_poker._tracker.registry — Trackers for many tables
=========================================================

Keeps one GameStateTracker per table and a lock per table in use. The
lock scopes check-then-submit-then-advance for callers acting on the
same table concurrently; different tables never contend.

Evicting a table forgets its tracker but remembers its last hand_ref,
so a later ``reset`` still moves the table on to the next hand.
"""

from __future__ import annotations
from typing import AsyncContextManager, Dict, List
import logging

from .._shared.locks import KeyedLocks
from .state_machine import GameStateTracker
from .table_state import TableState

logger = logging.getLogger("secret_poker.tracker.registry")


class TableRegistry:
    """In-process registry of table trackers."""

    def __init__(self):
        self._trackers: Dict[int, GameStateTracker] = {}
        self._last_hand_refs: Dict[int, int] = {}
        self._locks = KeyedLocks()

    def __contains__(self, table_id: int) -> bool:
        return table_id in self._trackers

    def __len__(self) -> int:
        return len(self._trackers)

    def tracker(self, table_id: int) -> GameStateTracker:
        """Get the tracker for ``table_id``, creating a lobby tracker if new."""
        if table_id not in self._trackers:
            state = None
            if table_id in self._last_hand_refs:
                state = TableState(table_id=table_id,
                                   hand_ref=self._last_hand_refs.pop(table_id))
            self._trackers[table_id] = GameStateTracker(table_id, state)
        return self._trackers[table_id]

    def hold(self, table_id: int) -> AsyncContextManager[None]:
        """Lock ``table_id`` for the duration of an ``async with`` block."""
        return self._locks.hold(table_id)

    def locked(self, table_id: int) -> bool:
        return self._locks.locked(table_id)

    def last_hand_ref(self, table_id: int) -> int:
        """hand_ref of the table's current or most recently evicted hand."""
        if table_id in self._trackers:
            return self._trackers[table_id].hand_ref
        return self._last_hand_refs.get(table_id, 0)

    def table_ids(self) -> List[int]:
        return sorted(self._trackers)

    def evict(self, table_id: int) -> None:
        """Forget a table's tracker, keeping only its last hand_ref."""
        tracker = self._trackers.pop(table_id, None)
        if tracker is not None:
            self._last_hand_refs[table_id] = tracker.hand_ref
            logger.info(f"[table {table_id}] Evicted from local registry")
