"""
secret_poker.capabilities — Interfaces the environment supplies
===============================================================

The package never talks to the network or holds keys itself. Callers
inject a ledger client and signers that satisfy these protocols, e.g.
thin adapters over a Secret Network LCD client and a wallet.

Ledger clients report network or node failures by raising
``secret_poker.errors.TransportError`` (plain ``OSError`` is accepted
and wrapped), and time out by raising ``asyncio.TimeoutError``.
"""

from __future__ import annotations
from typing import Any, Dict, Protocol, Sequence, runtime_checkable

from .models import ContractRef, ExecuteMessage, Settlement, TxOptions


@runtime_checkable
class Signer(Protocol):
    """Produces an address and amino signatures. Holds the key, never exposes it."""

    @property
    def address(self) -> str: ...

    async def sign_amino(
        self,
        address: str,
        sign_doc: Dict[str, Any],
        options: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Sign ``sign_doc``; the result carries a ``signature`` key."""
        ...


@runtime_checkable
class LedgerClient(Protocol):
    """Submits transactions and runs read-only queries against the chain."""

    async def execute_contract(
        self,
        message: ExecuteMessage,
        options: TxOptions,
    ) -> Settlement: ...

    async def broadcast(
        self,
        messages: Sequence[ExecuteMessage],
        options: TxOptions,
    ) -> Settlement: ...

    async def query_contract(
        self,
        contract: ContractRef,
        query: Dict[str, Any],
    ) -> Any: ...
