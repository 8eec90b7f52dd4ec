# Area: Transactions Tests
"""Tests for TxExecutor submission and failure classification."""

import asyncio

import pytest

from secret_poker._actions import builder
from secret_poker._tx.executor import TxExecutor, expected_responses, is_out_of_gas
from secret_poker._tx.gas import (
    GAS_BATCH_OVERHEAD,
    GAS_REVEAL_STREET,
    GAS_START_GAME,
    estimate_gas_limit,
)
from secret_poker.enums import BroadcastMode, GamePhase
from secret_poker.errors import (
    ConfigurationError,
    ContractRejectedError,
    InvalidActionError,
    MalformedResponseError,
    OutcomeUnknownError,
    OutOfGasError,
    TransportError,
)
from secret_poker.models import ContractRef, ExecuteMessage, SubmissionBudget


BUDGET = SubmissionBudget(gas_limit=150_000)


def submit(executor, signer, contract, actions, budget=BUDGET):
    return asyncio.run(executor.submit(signer, contract, actions, budget))


class TestSubmit:
    """Tests for the success paths of TxExecutor.submit."""

    def test_single_action_uses_execute_contract(self, ledger, dealer, contract,
                                                 settlement_factory, replies, players):
        ledger.queue(settlement_factory([replies.start_game()]))
        executor = TxExecutor(ledger)

        result = submit(executor, dealer, contract, [builder.start_game(42, players, 1)])

        assert result.confirmed is True
        assert result.tx_hash == "ABC123"
        assert [e.kind for e in result.decoded_events] == ["start_game"]
        assert ledger.broadcasts == []
        message, options = ledger.executed[0]
        assert isinstance(message, ExecuteMessage)
        assert message.sender == dealer.address
        assert message.contract_address == "secret1contract"
        assert message.code_hash == "d896d5a9"
        assert "start_game" in message.msg
        assert options.gas_limit == 150_000
        assert options.fee_denom == "uscrt"

    def test_batch_uses_broadcast_in_order(self, ledger, dealer, contract,
                                           settlement_factory, replies, players):
        ledger.queue(settlement_factory([replies.start_game(), replies.community()]))
        actions = [
            builder.start_game(42, players, 1),
            builder.reveal_street(42, GamePhase.FLOP),
        ]

        result = submit(TxExecutor(ledger), dealer, contract, actions)

        messages, _ = ledger.broadcasts[0]
        assert [next(iter(m.msg)) for m in messages] == ["start_game", "community_cards"]
        assert len(result.decoded_events) == 2
        assert ledger.executed == []

    def test_fee_follows_gas_price(self, ledger, dealer, contract,
                                   settlement_factory, replies, players):
        ledger.queue(settlement_factory([replies.start_game()]))
        executor = TxExecutor(ledger, fee_denom="uscrt", gas_price=0.25)
        submit(executor, dealer, contract, [builder.start_game(42, players, 1)],
               SubmissionBudget(gas_limit=100_001))
        _, options = ledger.executed[0]
        assert options.fee_amount == 25_001

    def test_random_request_needs_no_reply(self, ledger, dealer, contract, settlement_factory):
        ledger.queue(settlement_factory([]))
        result = submit(TxExecutor(ledger), dealer, contract, [builder.random_request()])
        assert result.confirmed
        assert result.decoded_events == ()

    def test_uncommitted_settlement_is_not_confirmed(self, ledger, dealer, contract,
                                                     settlement_factory, players):
        ledger.queue(settlement_factory([], height=None))
        budget = SubmissionBudget(gas_limit=150_000, mode=BroadcastMode.SYNC)

        result = submit(TxExecutor(ledger), dealer, contract,
                        [builder.start_game(42, players, 1)], budget)

        assert result.confirmed is False
        assert result.decoded_events == ()
        _, options = ledger.executed[0]
        assert options.broadcast_mode == BroadcastMode.SYNC

    def test_committed_without_reply_is_malformed(self, ledger, dealer, contract,
                                                  settlement_factory, players):
        ledger.queue(settlement_factory([]))
        with pytest.raises(MalformedResponseError):
            submit(TxExecutor(ledger), dealer, contract, [builder.start_game(42, players, 1)])


class TestSubmitFailures:
    """Failures are classified and never retried."""

    def test_empty_batch(self, ledger, dealer, contract):
        with pytest.raises(InvalidActionError):
            submit(TxExecutor(ledger), dealer, contract, [])
        assert ledger.executed == [] and ledger.broadcasts == []

    def test_incomplete_contract(self, ledger, dealer, players):
        contract = ContractRef.model_construct(address="secret1contract", code_hash="")
        with pytest.raises(ConfigurationError):
            submit(TxExecutor(ledger), dealer, contract, [builder.start_game(42, players, 1)])

    def test_out_of_gas(self, ledger, dealer, contract, settlement_factory, players):
        ledger.queue(settlement_factory(
            code=11, codespace="sdk", gas_used=32_581, gas_wanted=30_000,
            raw_log="out of gas in location: WritePerByte; gasWanted: 30000, gasUsed: 32581",
        ))
        with pytest.raises(OutOfGasError) as exc_info:
            submit(TxExecutor(ledger), dealer, contract,
                   [builder.start_game(42, players, 1)], SubmissionBudget(gas_limit=30_000))
        assert exc_info.value.gas_limit == 30_000
        assert exc_info.value.gas_used == 32_581
        assert len(ledger.executed) == 1

    def test_other_code_is_rejection(self, ledger, dealer, contract, settlement_factory, players):
        ledger.queue(settlement_factory(code=3, codespace="wasm", raw_log="execute wasm contract failed"))
        with pytest.raises(ContractRejectedError) as exc_info:
            submit(TxExecutor(ledger), dealer, contract, [builder.start_game(42, players, 1)])
        assert exc_info.value.code == 3
        assert "wasm contract failed" in exc_info.value.raw_log

    def test_transport_error_passes_through(self, ledger, dealer, contract, players):
        ledger.queue(TransportError("node unreachable"))
        with pytest.raises(TransportError, match="node unreachable"):
            submit(TxExecutor(ledger), dealer, contract, [builder.start_game(42, players, 1)])

    def test_connection_error_is_transport(self, ledger, dealer, contract, players):
        ledger.queue(ConnectionRefusedError("refused"))
        with pytest.raises(TransportError) as exc_info:
            submit(TxExecutor(ledger), dealer, contract, [builder.start_game(42, players, 1)])
        assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)

    def test_timeout_is_outcome_unknown(self, ledger, dealer, contract, players):
        ledger.queue(asyncio.TimeoutError())
        with pytest.raises(OutcomeUnknownError) as exc_info:
            submit(TxExecutor(ledger), dealer, contract, [
                builder.start_game(42, players, 1),
                builder.reveal_street(42, GamePhase.FLOP),
            ])
        assert exc_info.value.sender == dealer.address
        assert exc_info.value.action_count == 2

    def test_is_out_of_gas_by_log(self, settlement_factory):
        assert is_out_of_gas(settlement_factory(code=99, raw_log="Out of gas"))
        assert not is_out_of_gas(settlement_factory(code=5, raw_log="insufficient funds"))
        assert not is_out_of_gas(settlement_factory([]))


class TestSenderSerialization:
    """Submissions from one sender never overlap."""

    def test_same_sender_runs_one_at_a_time(self, ledger, dealer, contract,
                                            settlement_factory, replies, players):
        in_flight = []
        peak = []

        async def execute_contract(message, options):
            in_flight.append(message)
            peak.append(len(in_flight))
            await asyncio.sleep(0.01)
            in_flight.remove(message)
            return settlement_factory([replies.start_game(table_id=message.msg["start_game"]["table_id"])])

        ledger.execute_contract = execute_contract
        executor = TxExecutor(ledger)

        async def run():
            return await asyncio.gather(
                executor.submit(dealer, contract, [builder.start_game(1, players, 1)], BUDGET),
                executor.submit(dealer, contract, [builder.start_game(2, players, 1)], BUDGET),
            )

        results = asyncio.run(run())
        assert max(peak) == 1
        assert all(r.confirmed for r in results)

    def test_different_senders_overlap(self, ledger, contract, signer_factory,
                                       settlement_factory, replies, players):
        in_flight = []
        peak = []

        async def execute_contract(message, options):
            in_flight.append(message)
            peak.append(len(in_flight))
            await asyncio.sleep(0.01)
            in_flight.remove(message)
            return settlement_factory([replies.start_game()])

        ledger.execute_contract = execute_contract
        executor = TxExecutor(ledger)

        async def run():
            await asyncio.gather(
                executor.submit(signer_factory("a"), contract,
                                [builder.start_game(1, players, 1)], BUDGET),
                executor.submit(signer_factory("b"), contract,
                                [builder.start_game(2, players, 1)], BUDGET),
            )

        asyncio.run(run())
        assert max(peak) == 2


class TestGasEstimate:
    """Tests for gas sizing helpers."""

    def test_single_action(self, players):
        assert estimate_gas_limit([builder.start_game(1, players, 1)]) == GAS_START_GAME

    def test_batch_adds_overhead(self, players):
        actions = [builder.start_game(1, players, 1), builder.reveal_street(1, GamePhase.FLOP)]
        assert estimate_gas_limit(actions) == GAS_START_GAME + GAS_REVEAL_STREET + GAS_BATCH_OVERHEAD

    def test_expected_responses_skips_random(self, players):
        actions = [builder.random_request(), builder.start_game(1, players, 1)]
        assert expected_responses(actions) == 1
