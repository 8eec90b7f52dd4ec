# Area: Test Fixtures
"""
Pytest fixtures for secret_poker tests.

FakeLedger and FakeSigner stand in for the injected capabilities:
the ledger replays queued settlements (or raises queued exceptions)
and records every call it receives.
"""

import asyncio
import json

import pytest

from secret_poker.models import ContractRef, Settlement

ALICE = "secret1alice"
BOB = "secret1bob"
CAROL = "secret1carol"
DEALER = "secret1dealer"


def make_settlement(responses=(), code=0, height=1200, tx_hash="ABC123",
                    raw_log="", gas_used=45_000, gas_wanted=50_000,
                    codespace="", extra_attributes=None):
    """Build a settlement whose logs carry one wasm response per entry."""
    json_log = []
    for response in responses:
        attributes = [{"key": "contract_address", "value": "secret1contract"}]
        attributes.append({
            "key": "response",
            "value": response if isinstance(response, str) else json.dumps(response),
        })
        attributes.extend(extra_attributes or [])
        json_log.append({
            "msg_index": len(json_log),
            "events": [
                {"type": "message", "attributes": [{"key": "action", "value": "execute"}]},
                {"type": "wasm", "attributes": attributes},
            ],
        })
    return Settlement(
        tx_hash=tx_hash,
        code=code,
        codespace=codespace,
        raw_log=raw_log,
        json_log=json_log if code == 0 else None,
        height=height,
        gas_used=gas_used,
        gas_wanted=gas_wanted,
    )


class FakeSigner:
    def __init__(self, address, signature=None, error=None):
        self._address = address
        self.signature = signature or {
            "pub_key": {"type": "tendermint/PubKeySecp256k1", "value": "A1b2"},
            "signature": f"sig-of-{address}",
        }
        self.error = error
        self.calls = []

    @property
    def address(self):
        return self._address

    async def sign_amino(self, address, sign_doc, options):
        self.calls.append((address, sign_doc, options))
        if self.error is not None:
            raise self.error
        return {"signed": sign_doc, "signature": self.signature}


class FakeLedger:
    def __init__(self):
        self.outcomes = []
        self.executed = []
        self.broadcasts = []
        self.queries = []
        self.query_result = {"ok": True}
        self.delay = 0

    def queue(self, outcome):
        self.outcomes.append(outcome)

    async def _next(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def execute_contract(self, message, options):
        self.executed.append((message, options))
        return await self._next()

    async def broadcast(self, messages, options):
        self.broadcasts.append((list(messages), options))
        return await self._next()

    async def query_contract(self, contract, query):
        self.queries.append((contract, query))
        return self.query_result


@pytest.fixture
def contract():
    return ContractRef(address="secret1contract", code_hash="d896d5a9")


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def dealer():
    return FakeSigner(DEALER)


@pytest.fixture
def settlement_factory():
    return make_settlement


@pytest.fixture
def signer_factory():
    return FakeSigner


def start_game_reply(table_id=42, hand_ref=1, players=(ALICE, BOB, CAROL)):
    return {"type": "start_game", "table_id": table_id, "hand_ref": hand_ref,
            "players": list(players)}


def community_reply(table_id=42, hand_ref=1, game_state="flop", cards=(1, 18, 35)):
    return {"type": "community_cards", "table_id": table_id, "hand_ref": hand_ref,
            "game_state": game_state, "community_cards": list(cards)}


def showdown_reply(table_id=42, hand_ref=1):
    return {"type": "showdown", "table_id": table_id, "hand_ref": hand_ref,
            "players_cards": [["a1b2", [1, 2]], ["c3d4", [17, 18]]],
            "community_cards": None}


@pytest.fixture
def replies():
    """Factories for the contract's tagged reply payloads."""
    class Replies:
        start_game = staticmethod(start_game_reply)
        community = staticmethod(community_reply)
        showdown = staticmethod(showdown_reply)
    return Replies


@pytest.fixture
def players():
    return [ALICE, BOB, CAROL]
