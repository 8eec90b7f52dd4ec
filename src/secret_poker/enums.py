"""
secret_poker.enums — Table phase and broadcast mode enums
=========================================================

Phase values match the contract's snake_case ``GameState`` tokens,
so ``GamePhase.FLOP.value`` is exactly what goes on the wire.
"""

from enum import Enum


class GamePhase(Enum):
    """
    Phases of one hand at a poker table.

    State transitions:
    LOBBY -> PRE_FLOP (on confirmed StartGame)
    PRE_FLOP -> FLOP (on confirmed RevealStreet(FLOP))
    FLOP -> TURN (on confirmed RevealStreet(TURN))
    TURN -> RIVER (on confirmed RevealStreet(RIVER))
    RIVER -> SHOWDOWN (on confirmed Showdown)
    PRE_FLOP / FLOP / TURN -> SHOWDOWN (on confirmed all-in Showdown)
    Any state -> LOBBY (on reset, hand_ref + 1)
    """
    LOBBY = "lobby"
    PRE_FLOP = "pre_flop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"


# Phases that deal community cards
STREETS = (GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER)


class BroadcastMode(Enum):
    """
    When a broadcast returns.

    BLOCK waits for inclusion in a block, SYNC for mempool acceptance
    (CheckTx), ASYNC returns immediately.
    """
    BLOCK = "Block"
    SYNC = "Sync"
    ASYNC = "Async"
