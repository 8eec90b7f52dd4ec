# Area: Permits
"""
Read-only contract queries.

``player_cards_query`` and ``player_private_data_query`` must be wrapped
with a permit. The community card and showdown queries are public: the
street and hand secrets in them are the authorization.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Sequence

from ..enums import GamePhase, STREETS
from ..errors import InvalidActionError


def player_cards_query(table_id: int) -> Dict[str, Any]:
    """The caller's hole cards at ``table_id``."""
    return {"get_player_cards": {"table_id": table_id}}


def player_private_data_query(table_id: int) -> Dict[str, Any]:
    """Hole cards plus the caller's hand seed and street secrets."""
    return {"player_private_data": {"table_id": table_id}}


def community_cards_query(table_id: int, phase: GamePhase, secret_key: int) -> Dict[str, Any]:
    """
    Community cards of one street, unlocked by that street's secret.

    Raises:
        InvalidActionError: If ``phase`` is not FLOP, TURN or RIVER
    """
    if phase not in STREETS:
        name = phase.value if isinstance(phase, GamePhase) else repr(phase)
        raise InvalidActionError(
            "community_cards_query",
            [f"phase: {name} is not a community card phase"],
        )
    return {
        "community_cards": {
            "table_id": table_id,
            "game_state": phase.value,
            "secret_key": secret_key,
        }
    }


def showdown_query(table_id: int, players_secrets: Sequence[int],
                   flop_secret: Optional[int] = None,
                   turn_secret: Optional[int] = None,
                   river_secret: Optional[int] = None) -> Dict[str, Any]:
    """Hands of the players whose hand secrets are given, plus unlocked streets."""
    return {
        "showdown": {
            "table_id": table_id,
            "flop_secret": flop_secret,
            "turn_secret": turn_secret,
            "river_secret": river_secret,
            "players_secrets": list(players_secrets),
        }
    }
