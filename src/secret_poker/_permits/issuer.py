# Area: Permits
"""
secret_poker._permits.issuer — Query permit issuing
===================================================

A query permit is an amino signature over a sign doc that can never be
a valid transaction: zero fee, gas "1", account number and sequence "0",
empty memo. The contract checks the signature and scope when a query
arrives wrapped in ``with_permit``; nothing here decides whether a
permit is still valid.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
import logging

from ..errors import SigningError
from ..models import Permit, PermitScope

logger = logging.getLogger("secret_poker.permits")

PERMIT_MSG_TYPE = "query_permit"
DEFAULT_FEE_DENOM = "uscrt"

# Fee and memo are fixed, so wallets should not offer to edit them
SIGN_OPTIONS: Dict[str, Any] = {
    "preferNoSetFee": True,
    "preferNoSetMemo": True,
}


def build_permit_sign_doc(scope: PermitScope,
                          fee_denom: str = DEFAULT_FEE_DENOM) -> Dict[str, Any]:
    """Canonical sign doc for a query permit."""
    return {
        "chain_id": scope.chain_id,
        "account_number": "0",
        "sequence": "0",
        "fee": {
            "amount": [{"denom": fee_denom, "amount": "0"}],
            "gas": "1",
        },
        "msgs": [
            {
                "type": PERMIT_MSG_TYPE,
                "value": {
                    "permit_name": scope.name,
                    "allowed_tokens": list(scope.allowed_contracts),
                    "permissions": list(scope.permissions),
                },
            }
        ],
        "memo": "",
    }


def authorized_query(permit: Permit, query: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a read-only query in a ``with_permit`` envelope."""
    return {
        "with_permit": {
            "query": query,
            "permit": {
                "params": permit.params,
                "signature": permit.signature,
            },
        }
    }


class PermitIssuer:
    """
    Issues query permits and remembers them for the process lifetime.

    Permits are keyed by ``(signer_address, permit_name)``. ``revoke``
    only discards the local copy; the contract stays the authority on
    whether a permit is accepted.
    """

    def __init__(self, fee_denom: str = DEFAULT_FEE_DENOM):
        self.fee_denom = fee_denom
        self._permits: Dict[Tuple[str, str], Permit] = {}
        self._revoked: set = set()

    async def issue(self, signer, scope: PermitScope) -> Permit:
        """
        Have ``signer`` sign a permit for ``scope``.

        Raises:
            SigningError: If the signer raises, or returns no signature
        """
        address = signer.address
        sign_doc = build_permit_sign_doc(scope, self.fee_denom)
        try:
            signed = await signer.sign_amino(address, sign_doc, dict(SIGN_OPTIONS))
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(address, f"{type(e).__name__}: {e}") from e

        signature = signed.get("signature") if isinstance(signed, dict) else None
        if not signature:
            raise SigningError(address, "signer returned no signature")

        permit = Permit(
            name=scope.name,
            allowed_contracts=scope.allowed_contracts,
            permissions=scope.permissions,
            chain_id=scope.chain_id,
            signature=signature,
            signer_address=address,
        )
        key = (address, scope.name)
        self._permits[key] = permit
        self._revoked.discard(key)
        logger.info(
            f"Issued permit '{scope.name}' for {address} "
            f"(permissions={list(scope.permissions)})"
        )
        return permit

    def get(self, signer_address: str, name: str) -> Optional[Permit]:
        """Previously issued, unrevoked permit, or None."""
        key = (signer_address, name)
        if key in self._revoked:
            return None
        return self._permits.get(key)

    def revoke(self, permit: Permit) -> None:
        key = (permit.signer_address, permit.name)
        self._permits.pop(key, None)
        self._revoked.add(key)
        logger.info(f"Revoked permit '{permit.name}' for {permit.signer_address}")

    def is_revoked(self, permit: Permit) -> bool:
        return (permit.signer_address, permit.name) in self._revoked
