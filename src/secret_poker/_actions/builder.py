# Area: Actions
"""
secret_poker._actions.builder — Builds contract actions
=======================================================

One function per action. Validation here is structural only (arity,
types, uniqueness); whether an action is legal for the table right now
is the tracker's job. Nothing in this module performs I/O.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Sequence

from pydantic import ValidationError

from ..enums import GamePhase, STREETS
from ..errors import InvalidActionError
from ..models import Player
from .actions import RandomRequest, RevealStreet, Showdown, StartGame


def _validation_messages(exc: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]


def start_game(table_id: int, players: Sequence[str], hand_ref: int,
               folded_win: bool = False) -> StartGame:
    """
    Build a StartGame action.

    Seat order is the order of ``players`` and is kept exactly. Players
    may be given as addresses or Player models.

    Raises:
        InvalidActionError: fewer than two players, a blank address,
            a duplicate address, or a malformed field
    """
    players = [p.address if isinstance(p, Player) else p for p in players]
    errors = []
    if len(players) < 2:
        errors.append(f"players: need at least 2, got {len(players)}")
    if any(not isinstance(p, str) or not p for p in players):
        errors.append("players: addresses must be non-empty strings")
    seen = set()
    duplicates = []
    for p in players:
        if p in seen and p not in duplicates:
            duplicates.append(p)
        seen.add(p)
    if duplicates:
        errors.append(f"players: duplicate addresses {duplicates}")
    if errors:
        raise InvalidActionError("start_game", errors)

    try:
        return StartGame(
            table_id=table_id,
            hand_ref=hand_ref,
            folded_win=folded_win,
            players=tuple(players),
        )
    except ValidationError as exc:
        raise InvalidActionError("start_game", _validation_messages(exc)) from exc


def reveal_street(table_id: int, phase: GamePhase) -> RevealStreet:
    """Build a community-card reveal for FLOP, TURN or RIVER."""
    if phase not in STREETS:
        name = phase.value if isinstance(phase, GamePhase) else repr(phase)
        raise InvalidActionError(
            "reveal_street",
            [f"phase: {name} is not a community card phase"],
        )
    try:
        return RevealStreet(table_id=table_id, phase=phase)
    except ValidationError as exc:
        raise InvalidActionError("reveal_street", _validation_messages(exc)) from exc


def showdown(table_id: int, shown_players: Iterable[str],
             all_in_showdown: bool = False) -> Showdown:
    """
    Build a Showdown action.

    ``shown_players`` is a set of addresses; repeats are dropped and the
    first-seen order is what the contract receives.
    """
    shown = list(dict.fromkeys(shown_players))
    if any(not isinstance(p, str) or not p for p in shown):
        raise InvalidActionError(
            "showdown", ["show_cards: addresses must be non-empty strings"]
        )
    try:
        return Showdown(
            table_id=table_id,
            show_cards=tuple(shown),
            all_in_showdown=all_in_showdown,
        )
    except ValidationError as exc:
        raise InvalidActionError("showdown", _validation_messages(exc)) from exc


def random_request() -> RandomRequest:
    return RandomRequest()


def render_messages(actions: Sequence[Any]) -> List[Dict[str, Any]]:
    """Render actions to contract messages, keeping their order."""
    return [action.to_message() for action in actions]
