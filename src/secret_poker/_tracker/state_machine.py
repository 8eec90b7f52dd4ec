# Area: Tracker
"""
secret_poker._tracker.state_machine — Table phase state machine
===============================================================

Mirrors the phase order the contract enforces for one table so that an
out-of-sequence action fails locally instead of burning gas.

Check-then-confirm: ``check``/``can_submit`` run before submission and
never mutate; ``advance`` runs only once the ledger has confirmed the
action. Local state is a cache of chain state and is corrected through
``reconcile``/``resync`` when the two disagree.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence
import logging

from .._actions.actions import RandomRequest, RevealStreet, Showdown, StartGame, describe
from ..enums import GamePhase
from ..errors import IllegalTransitionError, StaleStateError
from ..models import ContractEvent
from .table_state import TableState

logger = logging.getLogger("secret_poker.tracker")


class TableEvent(Enum):
    """Confirmed actions that move a table between phases."""
    START_GAME = "START_GAME"
    REVEAL_FLOP = "REVEAL_FLOP"
    REVEAL_TURN = "REVEAL_TURN"
    REVEAL_RIVER = "REVEAL_RIVER"
    SHOWDOWN = "SHOWDOWN"
    ALL_IN_SHOWDOWN = "ALL_IN_SHOWDOWN"


# Valid transitions: {current_phase: {event: next_phase}}
TRANSITIONS: Dict[GamePhase, Dict[TableEvent, GamePhase]] = {
    GamePhase.LOBBY: {
        TableEvent.START_GAME: GamePhase.PRE_FLOP,
    },
    GamePhase.PRE_FLOP: {
        TableEvent.REVEAL_FLOP: GamePhase.FLOP,
        TableEvent.ALL_IN_SHOWDOWN: GamePhase.SHOWDOWN,
    },
    GamePhase.FLOP: {
        TableEvent.REVEAL_TURN: GamePhase.TURN,
        TableEvent.ALL_IN_SHOWDOWN: GamePhase.SHOWDOWN,
    },
    GamePhase.TURN: {
        TableEvent.REVEAL_RIVER: GamePhase.RIVER,
        TableEvent.ALL_IN_SHOWDOWN: GamePhase.SHOWDOWN,
    },
    GamePhase.RIVER: {
        TableEvent.SHOWDOWN: GamePhase.SHOWDOWN,
        TableEvent.ALL_IN_SHOWDOWN: GamePhase.SHOWDOWN,
    },
    GamePhase.SHOWDOWN: {},
}

_STREET_EVENTS = {
    GamePhase.FLOP: TableEvent.REVEAL_FLOP,
    GamePhase.TURN: TableEvent.REVEAL_TURN,
    GamePhase.RIVER: TableEvent.REVEAL_RIVER,
}


def event_for(action) -> Optional[TableEvent]:
    """Map an action to its table event. None for phase-neutral actions."""
    if isinstance(action, StartGame):
        return TableEvent.START_GAME
    if isinstance(action, RevealStreet):
        return _STREET_EVENTS[action.phase]
    if isinstance(action, Showdown):
        return TableEvent.ALL_IN_SHOWDOWN if action.all_in_showdown else TableEvent.SHOWDOWN
    if isinstance(action, RandomRequest):
        return None
    raise TypeError(f"Unknown action type: {type(action).__name__}")


def next_phase(phase: GamePhase, action) -> Optional[GamePhase]:
    """
    Phase the table moves to if ``action`` is confirmed from ``phase``.

    Returns ``phase`` unchanged for phase-neutral actions and None when
    the action is not legal from ``phase``.
    """
    event = event_for(action)
    if event is None:
        return phase
    return TRANSITIONS.get(phase, {}).get(event)


def can_submit(state: Optional[TableState], action) -> bool:
    """Check an action against the latest confirmed local state.

    A table with no state yet is in the lobby.
    """
    phase = state.phase if state is not None else GamePhase.LOBBY
    return next_phase(phase, action) is not None


class GameStateTracker:
    """
    Phase tracker for one table.

    Attributes:
        table_id: The table this tracker mirrors
        state: Confirmed local state, None until StartGame is confirmed
    """

    def __init__(self, table_id: int, state: Optional[TableState] = None):
        self.table_id = table_id
        self.state = state

    @property
    def phase(self) -> GamePhase:
        return self.state.phase if self.state is not None else GamePhase.LOBBY

    @property
    def hand_ref(self) -> int:
        return self.state.hand_ref if self.state is not None else 0

    @property
    def finished(self) -> bool:
        return self.phase == GamePhase.SHOWDOWN

    def snapshot(self) -> Dict[str, Any]:
        if self.state is None:
            return TableState(table_id=self.table_id).snapshot()
        return self.state.snapshot()

    def can_submit(self, action) -> bool:
        return can_submit(self.state, action)

    def check(self, action) -> None:
        """
        Fail fast if ``action`` is out of sequence.

        Raises:
            IllegalTransitionError: If the action is not legal from the current phase
        """
        if not self.can_submit(action):
            raise IllegalTransitionError(self.table_id, describe(action), self.phase.value)

    def plan(self, actions: Sequence) -> List[GamePhase]:
        """
        Validate an ordered batch against projected phases.

        Each action is checked against the phase the previous ones would
        leave the table in. Nothing is mutated.

        Returns:
            The projected phase after each action

        Raises:
            IllegalTransitionError: At the first action out of sequence
        """
        phase = self.phase
        projected = []
        for action in actions:
            following = next_phase(phase, action)
            if following is None:
                raise IllegalTransitionError(self.table_id, describe(action), phase.value)
            projected.append(following)
            phase = following
        return projected

    def advance(self, action, event: Optional[ContractEvent] = None) -> GamePhase:
        """
        Move the table forward after ``action`` was confirmed on chain.

        Args:
            action: The confirmed action
            event: The contract's decoded reply for it, if any

        Returns:
            The new phase

        Raises:
            StaleStateError: If the confirmed action or the contract's reply
                does not fit the local state
        """
        current = self.phase
        following = next_phase(current, action)
        if following is None:
            raise StaleStateError(
                self.table_id,
                local=self.snapshot(),
                remote={"confirmed_action": describe(action)},
            )
        if event_for(action) is None:
            return current

        expected_ref = action.hand_ref if isinstance(action, StartGame) else self.hand_ref
        if event is not None and event.hand_ref is not None \
                and event.hand_ref != expected_ref:
            raise StaleStateError(
                self.table_id,
                local=self.snapshot(),
                remote={"hand_ref": event.hand_ref, "event": event.kind},
            )
        if isinstance(action, StartGame):
            self.state = TableState(
                table_id=self.table_id,
                players=tuple(action.players),
                hand_ref=action.hand_ref,
            )

        if following != current:
            logger.info(f"[table {self.table_id}] Phase: {current.value} → {following.value}")
        self.state.phase = following
        if isinstance(action, RevealStreet):
            self.state.revealed_streets.add(action.phase)
        return following

    def reconcile(self, observed_phase: GamePhase, observed_hand_ref: int) -> None:
        """
        Compare local state with what the contract reports.

        Raises:
            StaleStateError: If phase or hand_ref differ
        """
        if observed_phase != self.phase or observed_hand_ref != self.hand_ref:
            raise StaleStateError(
                self.table_id,
                local=self.snapshot(),
                remote={"phase": observed_phase.value, "hand_ref": observed_hand_ref},
            )

    def resync(self, phase: GamePhase, hand_ref: int,
               players: Optional[Sequence[str]] = None) -> None:
        """Overwrite local state with the contract's authoritative view."""
        logger.warning(
            f"[table {self.table_id}] Resync: {self.phase.value}/{self.hand_ref} "
            f"→ {phase.value}/{hand_ref}"
        )
        if self.state is None:
            self.state = TableState(table_id=self.table_id)
        self.state.phase = phase
        self.state.hand_ref = hand_ref
        if players is not None:
            self.state.players = tuple(players)
        order = list(_STREET_EVENTS)
        if phase in order:
            self.state.revealed_streets = set(order[:order.index(phase) + 1])
        elif phase in (GamePhase.LOBBY, GamePhase.PRE_FLOP):
            self.state.revealed_streets = set()

    def reset(self) -> None:
        """Return the table to the lobby for a new hand."""
        hand_ref = self.hand_ref + 1
        logger.info(f"[table {self.table_id}] Reset to lobby, hand_ref {hand_ref}")
        if self.state is None:
            self.state = TableState(table_id=self.table_id)
        self.state.phase = GamePhase.LOBBY
        self.state.hand_ref = hand_ref
        self.state.revealed_streets = set()
