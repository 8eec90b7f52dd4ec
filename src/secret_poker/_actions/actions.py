# Area: Actions
"""
secret_poker._actions.actions — Table action value objects
==========================================================

Closed set of actions the poker contract executes. Each action is a
frozen model tagged by ``kind`` and renders itself to the exact message
the contract expects:

    start_game       {table_id, hand_ref, folded_win, players}
    community_cards  {table_id, game_state: "flop" | "turn" | "river"}
    showdown         {table_id, show_cards, all_in_showdown}
    random_request   {}
"""

from __future__ import annotations
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from ..enums import GamePhase

# Wire message names
START_GAME = "start_game"
COMMUNITY_CARDS = "community_cards"
SHOWDOWN = "showdown"
RANDOM_REQUEST = "random_request"


class _BaseAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def table(self) -> Optional[int]:
        """Table this action targets, or None for table-less actions."""
        return getattr(self, "table_id", None)

    def to_message(self) -> Dict[str, Any]:
        raise NotImplementedError


class StartGame(_BaseAction):
    kind: Literal["start_game"] = "start_game"
    table_id: int = Field(ge=0)
    hand_ref: int = Field(ge=0)
    folded_win: bool = False
    players: Tuple[str, ...]

    def to_message(self) -> Dict[str, Any]:
        return {
            START_GAME: {
                "table_id": self.table_id,
                "hand_ref": self.hand_ref,
                "folded_win": self.folded_win,
                "players": list(self.players),
            }
        }


class RevealStreet(_BaseAction):
    kind: Literal["reveal_street"] = "reveal_street"
    table_id: int = Field(ge=0)
    phase: GamePhase

    def to_message(self) -> Dict[str, Any]:
        return {
            COMMUNITY_CARDS: {
                "table_id": self.table_id,
                "game_state": self.phase.value,
            }
        }


class Showdown(_BaseAction):
    kind: Literal["showdown"] = "showdown"
    table_id: int = Field(ge=0)
    show_cards: Tuple[str, ...] = ()
    all_in_showdown: bool = False

    def to_message(self) -> Dict[str, Any]:
        return {
            SHOWDOWN: {
                "table_id": self.table_id,
                "show_cards": list(self.show_cards),
                "all_in_showdown": self.all_in_showdown,
            }
        }


class RandomRequest(_BaseAction):
    kind: Literal["random_request"] = "random_request"

    def to_message(self) -> Dict[str, Any]:
        return {RANDOM_REQUEST: {}}


Action = Annotated[
    Union[StartGame, RevealStreet, Showdown, RandomRequest],
    Field(discriminator="kind"),
]


def describe(action: _BaseAction) -> str:
    """Short label for logs and errors, e.g. ``reveal_street(flop)``."""
    if isinstance(action, RevealStreet):
        return f"{action.kind}({action.phase.value})"
    if isinstance(action, Showdown) and action.all_in_showdown:
        return f"{action.kind}(all_in)"
    return action.kind
