"""
secret_poker.client — Table orchestration
=========================================

PokerTableClient drives tables on the poker contract:

    tracker.plan  ->  builder  ->  executor.submit  ->  decoder  ->  tracker.advance

Each table's check-submit-advance runs under that table's lock, so two
coroutines acting on one table cannot both pass the same legality check.
The tracker only advances on a confirmed, fully decoded settlement.

Usage:
    client = PokerTableClient.from_config(ledger, dealer_signer)
    await client.start_game(42, [a, b, c], hand_ref=1)
    await client.reveal_street(42, GamePhase.FLOP)

    permit = await client.issue_permit(player_signer)
    cards = await client.query_player_cards(permit, 42)
"""

from __future__ import annotations
from contextlib import AsyncExitStack
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging

from ._actions import builder
from ._actions.actions import RandomRequest, RevealStreet, StartGame, describe
from ._permits.issuer import PermitIssuer, authorized_query
from ._permits.queries import (
    community_cards_query,
    player_cards_query,
    player_private_data_query,
    showdown_query,
)
from ._shared.config import ClientSettings, load_contract_ref, load_settings
from ._tracker.registry import TableRegistry
from ._tracker.state_machine import GameStateTracker
from ._tx.decoder import LAST_HAND_KIND, parse_query_reply, reply_kind
from ._tx.executor import TxExecutor
from ._tx.gas import estimate_gas_limit
from .enums import GamePhase
from .errors import (
    MalformedResponseError,
    PermitRevokedError,
    SecretPokerError,
    TransportError,
)
from .models import (
    CommunityCardsResponse,
    ContractEvent,
    ContractRef,
    Permit,
    PermitScope,
    PlayerDataResponse,
    ShowdownResponse,
    SubmissionBudget,
    SubmissionResult,
)

logger = logging.getLogger("secret_poker.client")

DEFAULT_PERMIT_NAME = "query_cards"
DEFAULT_PERMISSIONS = ("allowance",)


class PokerTableClient:
    """
    Orchestrates actions and permit queries against one poker contract.

    Attributes:
        ledger: Injected ledger client
        signer: Signer that submits table actions (the contract owner)
        contract: The deployed contract
        settings: Chain, fee and gas defaults
        registry: Per-table trackers and locks
        executor: Shared transaction submitter
        permits: Issued permits
    """

    def __init__(self, ledger, signer, contract: ContractRef,
                 settings: Optional[ClientSettings] = None,
                 registry: Optional[TableRegistry] = None,
                 permits: Optional[PermitIssuer] = None):
        self.ledger = ledger
        self.signer = signer
        self.contract = contract
        self.settings = settings or ClientSettings()
        self.registry = registry or TableRegistry()
        self.executor = TxExecutor(
            ledger,
            fee_denom=self.settings.fee_denom,
            gas_price=self.settings.gas_price,
        )
        self.permits = permits or PermitIssuer(fee_denom=self.settings.fee_denom)

    @classmethod
    def from_config(cls, ledger, signer,
                    config_path: Optional[str] = None) -> "PokerTableClient":
        """
        Build a client from settings and the persisted contract descriptor.

        Raises:
            ConfigurationError: If settings or the descriptor are missing or invalid
        """
        settings = load_settings(config_path)
        contract = load_contract_ref(settings.contract_info_path)
        return cls(ledger, signer, contract, settings=settings)

    def tracker(self, table_id: int) -> GameStateTracker:
        return self.registry.tracker(table_id)

    def budget_for(self, actions: Sequence) -> SubmissionBudget:
        """Default budget: the larger of the configured limit and the estimate."""
        gas_limit = max(self.settings.default_gas_limit, estimate_gas_limit(actions))
        return SubmissionBudget(gas_limit=gas_limit, mode=self.settings.broadcast_mode)

    # ── Table actions ─────────────────────────────────────────

    async def start_game(self, table_id: int, players: Sequence[str], hand_ref: int,
                         folded_win: bool = False,
                         budget: Optional[SubmissionBudget] = None) -> SubmissionResult:
        action = builder.start_game(table_id, players, hand_ref, folded_win)
        return await self.submit_batch([action], budget)

    async def reveal_street(self, table_id: int, phase: GamePhase,
                            budget: Optional[SubmissionBudget] = None) -> SubmissionResult:
        action = builder.reveal_street(table_id, phase)
        return await self.submit_batch([action], budget)

    async def showdown(self, table_id: int, shown_players: Iterable[str],
                       all_in_showdown: bool = False,
                       budget: Optional[SubmissionBudget] = None) -> SubmissionResult:
        action = builder.showdown(table_id, shown_players, all_in_showdown)
        return await self.submit_batch([action], budget)

    async def random_request(self,
                             budget: Optional[SubmissionBudget] = None) -> SubmissionResult:
        return await self.submit_batch([builder.random_request()], budget)

    async def submit_batch(self, actions: Sequence,
                           budget: Optional[SubmissionBudget] = None) -> SubmissionResult:
        """
        Submit actions atomically, in order, and advance confirmed tables.

        Every table in the batch is locked and its actions planned against
        projected phases before anything is sent. Nothing advances unless the
        settlement is confirmed and every reply decodes.

        Raises:
            IllegalTransitionError: Before any network call
            SecretPokerError: Any submission or decoding failure; trackers
                are left untouched
        """
        actions = list(actions)
        budget = budget or self.budget_for(actions)
        table_ids = sorted({a.table for a in actions if a.table is not None})

        async with AsyncExitStack() as stack:
            for table_id in table_ids:
                await stack.enter_async_context(self.registry.hold(table_id))

            for table_id in table_ids:
                self.tracker(table_id).plan([a for a in actions if a.table == table_id])

            try:
                result = await self.executor.submit(self.signer, self.contract, actions, budget)
            except SecretPokerError as e:
                logger.warning(
                    f"Submission of {[describe(a) for a in actions]} failed: "
                    f"{e.__class__.__name__}: {e}"
                )
                raise

            if result.confirmed:
                self._apply(actions, result)
            else:
                logger.info(
                    f"{result.tx_hash} not confirmed; tables {table_ids} not advanced"
                )
        return result

    def _apply(self, actions: List, result: SubmissionResult) -> None:
        pairs = self._pair_events(actions, result)
        for action, event in pairs:
            if action.table is not None:
                self.tracker(action.table).advance(action, event)

        for table_id in sorted({a.table for a in actions if a.table is not None}):
            if self.tracker(table_id).finished:
                self.registry.evict(table_id)

    def _pair_events(self, actions: List, result: SubmissionResult) -> List:
        replies: List[ContractEvent] = [
            e for e in result.decoded_events if e.kind != LAST_HAND_KIND
        ]
        pairs = []
        index = 0
        for action in actions:
            if isinstance(action, RandomRequest):
                pairs.append((action, None))
                continue
            event = replies[index]
            index += 1
            mismatch = self._reply_mismatch(action, event)
            if mismatch:
                raise MalformedResponseError(
                    f"reply {index} does not belong to {describe(action)} "
                    f"on table {action.table}: {mismatch}",
                    tx_hash=result.tx_hash,
                )
            pairs.append((action, event))
        return pairs

    @staticmethod
    def _reply_mismatch(action, event: ContractEvent) -> Optional[str]:
        expected = reply_kind(action)
        if event.kind != expected:
            return f"expected a '{expected}' reply, got '{event.kind}'"
        if event.table_id is not None and event.table_id != action.table:
            return f"reply is for table {event.table_id}"
        if isinstance(action, StartGame) and event.hand_ref is not None \
                and event.hand_ref != action.hand_ref:
            return f"reply carries hand_ref {event.hand_ref}, sent {action.hand_ref}"
        if isinstance(action, RevealStreet):
            game_state = event.payload.get("game_state")
            if game_state is not None and game_state != action.phase.value:
                return f"reply reveals '{game_state}'"
        return None

    # ── Local state ───────────────────────────────────────────

    def reconcile(self, table_id: int, phase: GamePhase, hand_ref: int) -> None:
        """Raise StaleStateError if the contract's view differs from ours."""
        self.tracker(table_id).reconcile(phase, hand_ref)

    def resync(self, table_id: int, phase: GamePhase, hand_ref: int,
               players: Optional[Sequence[str]] = None) -> None:
        """Adopt the contract's authoritative table state."""
        self.tracker(table_id).resync(phase, hand_ref, players)

    def reset(self, table_id: int) -> None:
        """Move the table to the lobby for its next hand, also after eviction."""
        self.tracker(table_id).reset()

    # ── Permits and queries ───────────────────────────────────

    async def issue_permit(self, signer, name: str = DEFAULT_PERMIT_NAME,
                           permissions: Sequence[str] = DEFAULT_PERMISSIONS) -> Permit:
        """Issue a permit scoped to this contract on the configured chain."""
        scope = PermitScope(
            name=name,
            allowed_contracts=(self.contract.address,),
            permissions=tuple(permissions),
            chain_id=self.settings.chain_id,
        )
        return await self.permits.issue(signer, scope)

    async def query(self, query: Dict[str, Any]) -> Any:
        """Run a read-only contract query. Queries take no table lock."""
        try:
            return await self.ledger.query_contract(self.contract, query)
        except TransportError:
            raise
        except OSError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

    async def query_with_permit(self, permit: Permit, query: Dict[str, Any]) -> Any:
        """
        Run ``query`` under ``permit``.

        Raises:
            PermitRevokedError: If the permit was revoked locally
        """
        if self.permits.is_revoked(permit):
            raise PermitRevokedError(permit.name, permit.signer_address)
        return await self.query(authorized_query(permit, query))

    async def query_player_cards(self, permit: Permit, table_id: int) -> Any:
        return await self.query_with_permit(permit, player_cards_query(table_id))

    async def query_private_data(self, permit: Permit, table_id: int) -> PlayerDataResponse:
        """
        The permit holder's hand and the hand and street secrets for ``table_id``.

        Raises:
            MalformedResponseError: If the reply does not match PlayerDataResponse
        """
        reply = await self.query_with_permit(permit, player_private_data_query(table_id))
        return parse_query_reply(PlayerDataResponse, reply)

    async def query_community_cards(self, table_id: int, phase: GamePhase,
                                    secret_key: int) -> CommunityCardsResponse:
        """Cards of one street, unlocked by the street secret from private data."""
        reply = await self.query(community_cards_query(table_id, phase, secret_key))
        return parse_query_reply(CommunityCardsResponse, reply)

    async def query_showdown(self, table_id: int, players_secrets: Sequence[int],
                             flop_secret: Optional[int] = None,
                             turn_secret: Optional[int] = None,
                             river_secret: Optional[int] = None) -> ShowdownResponse:
        reply = await self.query(showdown_query(
            table_id, players_secrets, flop_secret, turn_secret, river_secret,
        ))
        return parse_query_reply(ShowdownResponse, reply)
