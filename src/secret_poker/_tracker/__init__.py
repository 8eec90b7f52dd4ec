# Area: Tracker
"""
Tracker - Local mirror of table phases.

This package handles:
- The per-table phase state machine
- Pre-submission legality checks and batch planning
- Advancing on confirmed settlement, resync on divergence
- Per-table locking for many concurrent tables
"""

from .table_state import TableState
from .state_machine import GameStateTracker, TableEvent, TRANSITIONS, can_submit, next_phase
from .registry import TableRegistry
