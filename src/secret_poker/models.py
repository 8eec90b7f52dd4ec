"""
secret_poker.models — Value objects shared across the package
=============================================================

Immutable pydantic models for contract references, permits, ledger
settlements and submission results, plus typed forms of the replies the
poker contract emits in its ``response`` log attribute.
"""

from __future__ import annotations
from math import ceil
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import BroadcastMode, GamePhase


class ContractRef(BaseModel):
    """Address and code hash of the deployed poker contract."""
    model_config = ConfigDict(frozen=True)

    address: str = Field(min_length=1)
    code_hash: str = Field(min_length=1)


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str = Field(min_length=1)


# ── Permits ─────────────────────────────────────────────────

class PermitScope(BaseModel):
    """What a permit grants: which contracts, which permissions, on which chain."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    allowed_contracts: Tuple[str, ...] = Field(min_length=1)
    permissions: Tuple[str, ...] = Field(min_length=1)
    chain_id: str = Field(min_length=1)


class Permit(BaseModel):
    """
    A signed query permit.

    Holds only the signer's address and signature, never key material,
    so it can be handed to any query executor. Sequences keep the order
    they were issued with; the contract verifies the signature against
    exactly that order.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    allowed_contracts: Tuple[str, ...]
    permissions: Tuple[str, ...]
    chain_id: str
    signature: Any
    signer_address: str

    @property
    def params(self) -> Dict[str, Any]:
        return {
            "permit_name": self.name,
            "allowed_tokens": list(self.allowed_contracts),
            "chain_id": self.chain_id,
            "permissions": list(self.permissions),
        }


# ── Ledger I/O ──────────────────────────────────────────────

class ExecuteMessage(BaseModel):
    """One contract execution message, as handed to the ledger client."""
    model_config = ConfigDict(frozen=True)

    sender: str
    contract_address: str
    code_hash: str
    msg: Dict[str, Any]


class TxOptions(BaseModel):
    """Gas and fee policy for one broadcast."""
    model_config = ConfigDict(frozen=True)

    gas_limit: int = Field(gt=0)
    broadcast_mode: BroadcastMode = BroadcastMode.BLOCK
    fee_denom: str = "uscrt"
    gas_price: float = Field(default=0.1, ge=0)

    @property
    def fee_amount(self) -> int:
        """Fee in ``fee_denom`` the signer pays for ``gas_limit``."""
        return ceil(self.gas_limit * self.gas_price)


class SubmissionBudget(BaseModel):
    """Caller-sized gas ceiling for one submission."""
    model_config = ConfigDict(frozen=True)

    gas_limit: int = Field(gt=0)
    mode: BroadcastMode = BroadcastMode.BLOCK


class Settlement(BaseModel):
    """
    What the ledger client returns for a broadcast.

    ``json_log`` is the parsed per-message log: a list of
    ``{"events": [{"type": ..., "attributes": [{"key", "value"}]}]}``.
    ``height`` is None until the transaction is in a block.
    """
    model_config = ConfigDict(frozen=True)

    tx_hash: str
    code: int = 0
    codespace: str = ""
    raw_log: str = ""
    json_log: Optional[List[Dict[str, Any]]] = None
    height: Optional[int] = None
    gas_used: Optional[int] = None
    gas_wanted: Optional[int] = None

    @property
    def committed(self) -> bool:
        return self.height is not None and self.height > 0


class ContractEvent(BaseModel):
    """One structured reply extracted from a settlement's logs."""
    model_config = ConfigDict(frozen=True)

    kind: str
    table_id: Optional[int] = None
    hand_ref: Optional[int] = None
    payload: Dict[str, Any]


class SubmissionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    tx_hash: str
    raw_log: str
    decoded_events: Tuple[ContractEvent, ...] = ()
    confirmed: bool = False
    gas_used: Optional[int] = None
    gas_wanted: Optional[int] = None


# ── Typed contract replies ──────────────────────────────────

class Card(BaseModel):
    """A card as the contract packs it: ``(suit << 4) | rank``."""
    model_config = ConfigDict(frozen=True)

    suit: int = Field(ge=0, le=3)
    rank: int = Field(ge=1, le=13)

    @classmethod
    def from_byte(cls, value: int) -> "Card":
        return cls(suit=value >> 4, rank=value & 0b1111)

    def to_byte(self) -> int:
        return (self.suit << 4) | self.rank


def _cards(value: Any) -> Any:
    if isinstance(value, list):
        return [Card.from_byte(v) if isinstance(v, int) else v for v in value]
    return value


class StartGameResponse(BaseModel):
    table_id: int
    hand_ref: int
    players: List[str]


class CommunityCardsResponse(BaseModel):
    table_id: int
    hand_ref: int
    game_state: GamePhase
    community_cards: List[Card]

    @field_validator("community_cards", mode="before")
    @classmethod
    def unpack_cards(cls, value: Any) -> Any:
        return _cards(value)


class ShowdownResponse(BaseModel):
    table_id: int
    hand_ref: int
    players_cards: List[Tuple[str, List[Card]]]
    community_cards: Optional[List[Card]] = None

    @field_validator("players_cards", mode="before")
    @classmethod
    def unpack_player_cards(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [(entry[0], _cards(entry[1])) for entry in value]
        return value

    @field_validator("community_cards", mode="before")
    @classmethod
    def unpack_cards(cls, value: Any) -> Any:
        return _cards(value)


class PlayerDataResponse(BaseModel):
    """A player's private view of one hand, returned to permit queries."""
    table_id: int
    hand_ref: int
    hand: List[Card]
    hand_seed: int
    flop_secret: int
    turn_secret: int
    river_secret: int

    @field_validator("hand", mode="before")
    @classmethod
    def unpack_cards(cls, value: Any) -> Any:
        return _cards(value)


class ShowdownPlayer(BaseModel):
    username: str
    hand: List[str]


class LastHandLogResponse(BaseModel):
    showdown_players: List[ShowdownPlayer]
    community_cards: List[str]
    flop_retrieved_at: Optional[str] = None
    turn_retrieved_at: Optional[str] = None
    river_retrieved_at: Optional[str] = None
    showdown_retrieved_at: Optional[str] = None
