# Area: Actions
"""
Actions - Contract message construction.

This package handles:
- Action value objects (one per contract message)
- Structural validation of action input
- Rendering actions to wire messages
"""

from .actions import (
    Action,
    RandomRequest,
    RevealStreet,
    Showdown,
    StartGame,
    describe,
)
from .builder import (
    random_request,
    render_messages,
    reveal_street,
    showdown,
    start_game,
)
