# Area: Permits Tests
"""Tests for permit issuing and the with_permit envelope."""

import asyncio

import pytest

from secret_poker._permits.issuer import PermitIssuer, authorized_query, build_permit_sign_doc
from secret_poker._permits.queries import (
    community_cards_query,
    player_cards_query,
    player_private_data_query,
    showdown_query,
)
from secret_poker.enums import GamePhase
from secret_poker.errors import InvalidActionError, SigningError
from secret_poker.models import PermitScope


def make_scope(**overrides):
    fields = dict(
        name="query_cards",
        allowed_contracts=("secret1contract",),
        permissions=("allowance",),
        chain_id="pulsar-3",
    )
    fields.update(overrides)
    return PermitScope(**fields)


class TestSignDoc:
    """The sign doc must match the permit verifier byte for byte."""

    def test_fixed_fields(self):
        doc = build_permit_sign_doc(make_scope())
        assert doc == {
            "chain_id": "pulsar-3",
            "account_number": "0",
            "sequence": "0",
            "fee": {"amount": [{"denom": "uscrt", "amount": "0"}], "gas": "1"},
            "msgs": [{
                "type": "query_permit",
                "value": {
                    "permit_name": "query_cards",
                    "allowed_tokens": ["secret1contract"],
                    "permissions": ["allowance"],
                },
            }],
            "memo": "",
        }

    def test_custom_denom(self):
        doc = build_permit_sign_doc(make_scope(), fee_denom="uatom")
        assert doc["fee"]["amount"] == [{"denom": "uatom", "amount": "0"}]


class TestIssue:
    """Tests for PermitIssuer.issue."""

    def test_issue_returns_signed_permit(self, signer_factory):
        signer = signer_factory("secret1alice")
        issuer = PermitIssuer()
        permit = asyncio.run(issuer.issue(signer, make_scope()))

        assert permit.signer_address == "secret1alice"
        assert permit.signature == signer.signature
        assert permit.permissions == ("allowance",)
        address, doc, options = signer.calls[0]
        assert address == "secret1alice"
        assert doc["msgs"][0]["type"] == "query_permit"
        assert options == {"preferNoSetFee": True, "preferNoSetMemo": True}

    def test_permit_holds_no_key_material(self, signer_factory):
        permit = asyncio.run(PermitIssuer().issue(signer_factory("a"), make_scope()))
        assert set(permit.model_dump()) == {
            "name", "allowed_contracts", "permissions",
            "chain_id", "signature", "signer_address",
        }

    def test_signer_refusal_raises_signing_error(self, signer_factory):
        signer = signer_factory("secret1alice", error=RuntimeError("Request rejected"))
        with pytest.raises(SigningError) as exc_info:
            asyncio.run(PermitIssuer().issue(signer, make_scope()))
        assert exc_info.value.signer_address == "secret1alice"
        assert "Request rejected" in exc_info.value.reason

    def test_missing_signature_raises_signing_error(self):
        class EmptySigner:
            address = "secret1bob"

            async def sign_amino(self, address, sign_doc, options):
                return {}

        with pytest.raises(SigningError):
            asyncio.run(PermitIssuer().issue(EmptySigner(), make_scope()))

    def test_get_and_revoke(self, signer_factory):
        issuer = PermitIssuer()
        permit = asyncio.run(issuer.issue(signer_factory("a"), make_scope()))
        assert issuer.get("a", "query_cards") == permit

        issuer.revoke(permit)
        assert issuer.is_revoked(permit)
        assert issuer.get("a", "query_cards") is None

    def test_reissue_clears_revocation(self, signer_factory):
        issuer = PermitIssuer()
        signer = signer_factory("a")
        issuer.revoke(asyncio.run(issuer.issue(signer, make_scope())))
        permit = asyncio.run(issuer.issue(signer, make_scope()))
        assert not issuer.is_revoked(permit)


class TestAuthorizedQuery:
    """Wrapping is structural and lossless."""

    def test_envelope_contains_exact_params(self, signer_factory):
        scope = make_scope(
            allowed_contracts=("secret1b", "secret1a"),
            permissions=("owner", "allowance"),
        )
        signer = signer_factory("secret1alice")
        permit = asyncio.run(PermitIssuer().issue(signer, scope))
        query = {"get_player_cards": {"table_id": 42}}

        envelope = authorized_query(permit, query)

        assert envelope == {
            "with_permit": {
                "query": query,
                "permit": {
                    "params": {
                        "permit_name": "query_cards",
                        "allowed_tokens": ["secret1b", "secret1a"],
                        "chain_id": "pulsar-3",
                        "permissions": ["owner", "allowance"],
                    },
                    "signature": signer.signature,
                },
            }
        }

    def test_allowance_permission_verbatim(self, signer_factory):
        permit = asyncio.run(PermitIssuer().issue(signer_factory("a"), make_scope()))
        envelope = authorized_query(permit, player_cards_query(42))
        assert envelope["with_permit"]["permit"]["params"]["permissions"] == ["allowance"]
        assert envelope["with_permit"]["query"] == {"get_player_cards": {"table_id": 42}}

    def test_private_data_query(self):
        assert player_private_data_query(3) == {"player_private_data": {"table_id": 3}}


class TestPublicQueries:
    """Tests for the secret-keyed queries that need no permit."""

    def test_community_cards_query(self):
        assert community_cards_query(42, GamePhase.RIVER, 777) == {
            "community_cards": {"table_id": 42, "game_state": "river", "secret_key": 777},
        }

    @pytest.mark.parametrize("phase", [GamePhase.LOBBY, GamePhase.PRE_FLOP, GamePhase.SHOWDOWN])
    def test_community_cards_query_needs_street(self, phase):
        with pytest.raises(InvalidActionError) as exc_info:
            community_cards_query(42, phase, 777)
        assert exc_info.value.action == "community_cards_query"

    def test_showdown_query_keeps_missing_secrets(self):
        query = showdown_query(42, (5, 6), flop_secret=1, turn_secret=2)
        assert query == {"showdown": {
            "table_id": 42,
            "flop_secret": 1,
            "turn_secret": 2,
            "river_secret": None,
            "players_secrets": [5, 6],
        }}
