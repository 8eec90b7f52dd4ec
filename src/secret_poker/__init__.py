"""
secret_poker — Off-chain orchestration for a poker table contract
=================================================================

Quick Start:
    from secret_poker import PokerTableClient, GamePhase
    client = PokerTableClient.from_config(ledger, dealer_signer)
    await client.start_game(42, [a, b, c], hand_ref=1)
    await client.reveal_street(42, GamePhase.FLOP)

The ledger client and signers are supplied by the caller; see
``secret_poker.capabilities`` for the interfaces they must satisfy.

Lower-level pieces are importable on their own:

    from secret_poker import (
        start_game, reveal_street, showdown, random_request,   # builders
        GameStateTracker, TableRegistry,                       # tracker
        TxExecutor, decode,                                    # submission
        PermitIssuer, authorized_query,                        # permits
    )
"""

from ._actions import (
    Action,
    RandomRequest,
    RevealStreet,
    Showdown,
    StartGame,
    random_request,
    render_messages,
    reveal_street,
    showdown,
    start_game,
)
from ._permits import (
    PermitIssuer,
    authorized_query,
    build_permit_sign_doc,
    player_cards_query,
    player_private_data_query,
    community_cards_query,
    showdown_query,
)
from ._shared import ClientSettings, load_contract_ref, load_settings, log_error, setup_logging
from ._tracker import GameStateTracker, TableRegistry, TableState, can_submit
from ._tx import TxExecutor, decode, estimate_gas_limit, parse_query_reply, parse_response
from .capabilities import LedgerClient, Signer
from .client import PokerTableClient
from .enums import BroadcastMode, GamePhase
from .errors import (
    SecretPokerError,
    ConfigurationError,
    SigningError,
    InvalidActionError,
    IllegalTransitionError,
    TransportError,
    OutcomeUnknownError,
    OutOfGasError,
    ContractRejectedError,
    MalformedResponseError,
    StaleStateError,
    PermitRevokedError,
)
from .models import (
    Card,
    ContractEvent,
    ContractRef,
    ExecuteMessage,
    Permit,
    PermitScope,
    Player,
    PlayerDataResponse,
    Settlement,
    SubmissionBudget,
    SubmissionResult,
    TxOptions,
)

__all__ = [
    # Main classes
    "PokerTableClient",
    "GameStateTracker",
    "TableRegistry",
    "TableState",
    "TxExecutor",
    "PermitIssuer",
    # Capabilities
    "LedgerClient",
    "Signer",
    # Actions
    "Action",
    "StartGame",
    "RevealStreet",
    "Showdown",
    "RandomRequest",
    "start_game",
    "reveal_street",
    "showdown",
    "random_request",
    "render_messages",
    # Tracker / submission helpers
    "can_submit",
    "decode",
    "parse_response",
    "parse_query_reply",
    "estimate_gas_limit",
    # Permits
    "authorized_query",
    "build_permit_sign_doc",
    "player_cards_query",
    "player_private_data_query",
    "community_cards_query",
    "showdown_query",
    # Config and logging
    "ClientSettings",
    "load_settings",
    "load_contract_ref",
    "setup_logging",
    "log_error",
    # Enums
    "GamePhase",
    "BroadcastMode",
    # Models
    "Card",
    "ContractEvent",
    "ContractRef",
    "ExecuteMessage",
    "Permit",
    "PermitScope",
    "Player",
    "PlayerDataResponse",
    "Settlement",
    "SubmissionBudget",
    "SubmissionResult",
    "TxOptions",
    # Errors
    "SecretPokerError",
    "ConfigurationError",
    "SigningError",
    "InvalidActionError",
    "IllegalTransitionError",
    "TransportError",
    "OutcomeUnknownError",
    "OutOfGasError",
    "ContractRejectedError",
    "MalformedResponseError",
    "StaleStateError",
    "PermitRevokedError",
]
__version__ = "1.0.0"
