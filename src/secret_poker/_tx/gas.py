# Area: Transactions
"""
secret_poker._tx.gas — Gas sizing
=================================

Observed per-action costs on testnet. These only help a caller size a
budget; the executor never raises a limit on its own.
"""

from __future__ import annotations
from typing import Sequence

from .._actions.actions import RandomRequest, RevealStreet, Showdown, StartGame

# Deck shuffle and dealing make StartGame the most expensive action
GAS_START_GAME = 100_000
GAS_REVEAL_STREET = 50_000
GAS_SHOWDOWN = 50_000
GAS_RANDOM_REQUEST = 40_000
GAS_BATCH_OVERHEAD = 20_000


def action_gas(action) -> int:
    if isinstance(action, StartGame):
        return GAS_START_GAME
    if isinstance(action, RevealStreet):
        return GAS_REVEAL_STREET
    if isinstance(action, Showdown):
        return GAS_SHOWDOWN
    if isinstance(action, RandomRequest):
        return GAS_RANDOM_REQUEST
    raise TypeError(f"Unknown action type: {type(action).__name__}")


def estimate_gas_limit(actions: Sequence) -> int:
    """Suggested gas limit for submitting ``actions`` in one transaction."""
    total = sum(action_gas(a) for a in actions)
    if len(actions) > 1:
        total += GAS_BATCH_OVERHEAD
    return total
