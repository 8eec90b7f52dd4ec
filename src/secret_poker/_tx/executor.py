# Area: Transactions
"""
secret_poker._tx.executor — Transaction submission
==================================================

Submits one or more actions as a single transaction. A batch executes
atomically on chain in the given order: all actions succeed or the
whole transaction is rejected.

The executor never retries. A blind retry on a ledger risks a duplicate
submission, and an out-of-gas failure may change what the right next
estimate is, so every failure goes back to the caller as is.

Only one submission per sender is in flight at a time: a second one from
the same address waits for the first to settle instead of racing it for
the account sequence number.
"""

from __future__ import annotations
from typing import List, Sequence
import asyncio
import logging

from .._actions.actions import RandomRequest, describe
from .._shared.locks import KeyedLocks
from ..errors import (
    ConfigurationError,
    ContractRejectedError,
    InvalidActionError,
    OutcomeUnknownError,
    OutOfGasError,
    TransportError,
)
from ..models import (
    ContractRef,
    ExecuteMessage,
    Settlement,
    SubmissionBudget,
    SubmissionResult,
    TxOptions,
)
from .decoder import decode

logger = logging.getLogger("secret_poker.tx")

# Cosmos SDK ErrOutOfGas
OUT_OF_GAS_CODE = 11
SDK_CODESPACE = "sdk"


def is_out_of_gas(settlement: Settlement) -> bool:
    if settlement.code == OUT_OF_GAS_CODE and settlement.codespace in (SDK_CODESPACE, ""):
        return True
    return settlement.code != 0 and "out of gas" in settlement.raw_log.lower()


def expected_responses(actions: Sequence) -> int:
    """Number of ``response`` attributes a successful batch must carry."""
    return sum(1 for a in actions if not isinstance(a, RandomRequest))


class TxExecutor:
    """
    Shared submitter for all tables and senders.

    Attributes:
        ledger: The injected ledger client
        fee_denom: Denomination fees are paid in
        gas_price: Fee per unit of gas, in ``fee_denom``
    """

    def __init__(self, ledger, fee_denom: str = "uscrt", gas_price: float = 0.1):
        self.ledger = ledger
        self.fee_denom = fee_denom
        self.gas_price = gas_price
        self._sender_locks = KeyedLocks()

    def build_messages(self, sender: str, contract: ContractRef,
                       actions: Sequence) -> List[ExecuteMessage]:
        return [
            ExecuteMessage(
                sender=sender,
                contract_address=contract.address,
                code_hash=contract.code_hash,
                msg=action.to_message(),
            )
            for action in actions
        ]

    def tx_options(self, budget: SubmissionBudget) -> TxOptions:
        return TxOptions(
            gas_limit=budget.gas_limit,
            broadcast_mode=budget.mode,
            fee_denom=self.fee_denom,
            gas_price=self.gas_price,
        )

    async def submit(self, signer, contract: ContractRef, actions: Sequence,
                     budget: SubmissionBudget) -> SubmissionResult:
        """
        Submit ``actions`` as one transaction and wait for the ledger.

        Returns:
            SubmissionResult. ``confirmed`` is True only when the transaction
            is in a block, and only then are replies decoded.

        Raises:
            InvalidActionError: Empty batch
            ConfigurationError: Contract reference is incomplete
            TransportError: Network or node failure
            OutcomeUnknownError: Timed out after possibly broadcasting
            OutOfGasError: Ledger rejected the transaction for gas
            ContractRejectedError: Any other non-zero result code
            MalformedResponseError: Confirmed, but replies are missing
        """
        actions = list(actions)
        if not actions:
            raise InvalidActionError("submit", ["actions: batch is empty"])
        if not contract.address or not contract.code_hash:
            raise ConfigurationError("Contract reference needs both address and code hash")

        sender = signer.address
        messages = self.build_messages(sender, contract, actions)
        options = self.tx_options(budget)
        labels = [describe(a) for a in actions]

        async with self._sender_locks.hold(sender):
            logger.info(
                f"Submitting {len(actions)} action(s) from {sender}: {labels} "
                f"(gas_limit={options.gas_limit}, mode={options.broadcast_mode.value})"
            )
            settlement = await self._send(sender, messages, options)

        self._raise_for_code(settlement, options)

        if not settlement.committed:
            logger.info(f"Accepted {settlement.tx_hash}, not yet in a block")
            return SubmissionResult(
                tx_hash=settlement.tx_hash,
                raw_log=settlement.raw_log,
                confirmed=False,
                gas_used=settlement.gas_used,
                gas_wanted=settlement.gas_wanted,
            )

        events = decode(settlement, expected=expected_responses(actions))
        logger.info(
            f"Settled {settlement.tx_hash} at height {settlement.height} "
            f"(gas_used={settlement.gas_used}, events={len(events)})"
        )
        return SubmissionResult(
            tx_hash=settlement.tx_hash,
            raw_log=settlement.raw_log,
            decoded_events=tuple(events),
            confirmed=True,
            gas_used=settlement.gas_used,
            gas_wanted=settlement.gas_wanted,
        )

    async def _send(self, sender: str, messages: List[ExecuteMessage],
                    options: TxOptions) -> Settlement:
        try:
            if len(messages) == 1:
                return await self.ledger.execute_contract(messages[0], options)
            return await self.ledger.broadcast(messages, options)
        except TransportError:
            raise
        except asyncio.TimeoutError as e:
            # Must precede OSError: TimeoutError is an OSError subclass
            raise OutcomeUnknownError(sender, len(messages)) from e
        except OSError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

    def _raise_for_code(self, settlement: Settlement, options: TxOptions) -> None:
        if settlement.code == 0:
            return
        if is_out_of_gas(settlement):
            logger.error(
                f"Out of gas for {settlement.tx_hash}: "
                f"limit {options.gas_limit}, used {settlement.gas_used}"
            )
            raise OutOfGasError(options.gas_limit, settlement.gas_used, settlement.tx_hash)
        logger.error(f"Rejected {settlement.tx_hash}: code {settlement.code}")
        raise ContractRejectedError(settlement.code, settlement.raw_log, settlement.tx_hash)
