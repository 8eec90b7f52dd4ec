# Area: Tracker
"""
secret_poker._tracker.table_state — Local mirror of one table
=============================================================

The tracker owns these. Nothing outside the tracker mutates them, and
the tracker only does so after a matching action is confirmed on chain.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Set, Tuple

from ..enums import GamePhase


@dataclass
class TableState:
    """Expected contract-side state of one table for the current hand."""
    table_id: int
    phase: GamePhase = GamePhase.LOBBY
    players: Tuple[str, ...] = ()
    hand_ref: int = 0
    revealed_streets: Set[GamePhase] = field(default_factory=set)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "table_id": self.table_id,
            "phase": self.phase.value,
            "players": list(self.players),
            "hand_ref": self.hand_ref,
            "revealed_streets": sorted(p.value for p in self.revealed_streets),
        }
