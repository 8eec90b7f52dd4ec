# Area: Transactions
"""
secret_poker._tx.decoder — Settlement response decoding
=======================================================

The contract reports each executed action as a plaintext ``response``
attribute on a ``wasm`` event, holding a JSON object tagged by ``type``
(``start_game``, ``community_cards``, ``showdown``). StartGame may also
carry a ``previous_hand_log`` attribute describing the last hand.

A missing or unreadable reply is an error, never skipped: the tracker
must not advance for an action whose reply is absent.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Type
import json

from pydantic import BaseModel, ValidationError

from .._actions.actions import RevealStreet, Showdown, StartGame
from ..errors import MalformedResponseError
from ..models import (
    CommunityCardsResponse,
    ContractEvent,
    LastHandLogResponse,
    Settlement,
    ShowdownResponse,
    StartGameResponse,
)

WASM_EVENT_TYPE = "wasm"
RESPONSE_KEY = "response"
PREVIOUS_HAND_KEY = "previous_hand_log"
LAST_HAND_KIND = "last_hand"

# Action type -> kind of its reply
REPLY_KINDS = {
    StartGame: "start_game",
    RevealStreet: "community_cards",
    Showdown: "showdown",
}

RESPONSE_MODELS = {
    "start_game": StartGameResponse,
    "community_cards": CommunityCardsResponse,
    "showdown": ShowdownResponse,
    LAST_HAND_KIND: LastHandLogResponse,
}


def reply_kind(action) -> Optional[str]:
    """Kind of the reply the contract emits for ``action``; None if it emits none."""
    for action_type, kind in REPLY_KINDS.items():
        if isinstance(action, action_type):
            return kind
    return None


def _parse_attribute(value: Any, tx_hash: Optional[str]) -> Dict[str, Any]:
    if not isinstance(value, str):
        raise MalformedResponseError(
            f"attribute value is {type(value).__name__}, expected JSON text",
            tx_hash=tx_hash, raw_value=repr(value),
        )
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"response is not valid JSON ({e.msg})",
            tx_hash=tx_hash, raw_value=value,
        ) from e
    if not isinstance(parsed, dict):
        raise MalformedResponseError(
            f"response is {type(parsed).__name__}, expected an object",
            tx_hash=tx_hash, raw_value=value,
        )
    return parsed


def _to_event(kind: str, payload: Dict[str, Any]) -> ContractEvent:
    table_id = payload.get("table_id")
    hand_ref = payload.get("hand_ref")
    return ContractEvent(
        kind=kind,
        table_id=table_id if isinstance(table_id, int) else None,
        hand_ref=hand_ref if isinstance(hand_ref, int) else None,
        payload=payload,
    )


def _previous_hand(parsed: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    # Tagged the same way as responses; an empty body means no previous hand
    body = {k: v for k, v in parsed.items() if k != "type"}
    return body or None


def decode(settlement: Settlement, expected: Optional[int] = None) -> List[ContractEvent]:
    """
    Extract the contract's structured replies from a settlement.

    Args:
        settlement: A committed settlement
        expected: Minimum number of ``response`` attributes that must be present

    Returns:
        One ContractEvent per reply, in log order. ``previous_hand_log``
        attributes yield ``last_hand`` events right after their response.

    Raises:
        MalformedResponseError: If a reply is unparseable or fewer than
            ``expected`` replies are present
    """
    events: List[ContractEvent] = []
    responses = 0

    for log in settlement.json_log or []:
        for event in log.get("events", []):
            if event.get("type") != WASM_EVENT_TYPE:
                continue
            for attribute in event.get("attributes", []):
                key = attribute.get("key")
                if key == RESPONSE_KEY:
                    parsed = _parse_attribute(attribute.get("value"), settlement.tx_hash)
                    kind = parsed.get("type")
                    if not isinstance(kind, str):
                        raise MalformedResponseError(
                            "response has no 'type' tag",
                            tx_hash=settlement.tx_hash,
                            raw_value=attribute.get("value"),
                        )
                    events.append(_to_event(kind, parsed))
                    responses += 1
                elif key == PREVIOUS_HAND_KEY:
                    parsed = _parse_attribute(attribute.get("value"), settlement.tx_hash)
                    previous = _previous_hand(parsed)
                    if previous is not None:
                        events.append(_to_event(LAST_HAND_KIND, previous))

    if expected is not None and responses < expected:
        raise MalformedResponseError(
            f"expected {expected} response attribute(s), found {responses}",
            tx_hash=settlement.tx_hash,
            raw_value=settlement.raw_log or None,
        )
    return events


def parse_response(event: ContractEvent) -> BaseModel:
    """
    Typed form of a decoded event.

    Raises:
        MalformedResponseError: Unknown kind, or payload does not match its schema
    """
    model = RESPONSE_MODELS.get(event.kind)
    if model is None:
        raise MalformedResponseError(f"unknown response type '{event.kind}'")
    body = {k: v for k, v in event.payload.items() if k != "type"}
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise MalformedResponseError(
            f"'{event.kind}' response does not match its schema: {e.error_count()} error(s)",
            raw_value=json.dumps(event.payload, default=str),
        ) from e


def parse_query_reply(model: Type[BaseModel], reply: Any) -> BaseModel:
    """
    Typed form of a contract query reply.

    ``reply`` is what the ledger client returned: a parsed JSON object,
    or its JSON text.

    Raises:
        MalformedResponseError: If the reply is not an object matching ``model``
    """
    if isinstance(reply, str):
        reply = _parse_attribute(reply, tx_hash=None)
    if not isinstance(reply, dict):
        raise MalformedResponseError(
            f"query reply is {type(reply).__name__}, expected an object",
            raw_value=repr(reply),
        )
    try:
        return model.model_validate(reply)
    except ValidationError as e:
        raise MalformedResponseError(
            f"query reply does not match {model.__name__}: {e.error_count()} error(s)",
            raw_value=json.dumps(reply, default=str),
        ) from e
