from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

from solders.instruction import Instruction
from solders.pubkey import Pubkey

if TYPE_CHECKING:
    from realms_strategies.adapters.everlend_adapter.pool import Pool
    from realms_strategies.core.adapters.models import InstructionDataWithHoldUpTime
    from realms_strategies.core.clients.EverlendClient import ApyRecord
    from realms_strategies.core.clients.TokenListClient import TokenInfo
    from realms_strategies.core.governance.models import (
        Realm,
        TokenOwnerRecord,
    )
    from realms_strategies.core.utils.solana import ConnectionContext


class PoolClientProtocol(Protocol):
    async def find_pools(self, connection: Any, *, pool_market: Pubkey) -> list[Pool]:
        ...


class PoolTransactionBuilderProtocol(Protocol):
    """Builds the Everlend general-pool instructions for a single action."""

    async def prepare_deposit_tx(
        self,
        connection: ConnectionContext,
        *,
        payer: Pubkey,
        pool: Pubkey,
        registry: Pubkey,
        amount: int,
        source: Pubkey,
    ) -> Sequence[Instruction]:
        ...

    async def prepare_sol_deposit_tx(
        self,
        connection: ConnectionContext,
        *,
        payer: Pubkey,
        pool: Pubkey,
        registry: Pubkey,
        amount: int,
        source: Pubkey,
        destination: Pubkey,
    ) -> Sequence[Instruction]:
        ...

    async def prepare_withdrawal_request_tx(
        self,
        connection: ConnectionContext,
        *,
        payer: Pubkey,
        pool: Pubkey,
        registry: Pubkey,
        amount: int,
        source: Pubkey,
        destination: Pubkey | None,
    ) -> Sequence[Instruction]:
        ...


class ProposalCreatorProtocol(Protocol):
    async def __call__(
        self,
        rpc_context: Any,
        realm: Realm,
        governance: Pubkey,
        token_owner_record: TokenOwnerRecord,
        name: str,
        description_link: str,
        governing_token_mint: Pubkey,
        proposal_index: int,
        instructions: list[InstructionDataWithHoldUpTime],
        is_draft: bool,
        voting_client: Any | None = None,
    ) -> Pubkey:
        ...


class TokenInfoProviderProtocol(Protocol):
    async def ensure_loaded(self) -> None:
        ...

    def get_token_info(self, mint: str) -> TokenInfo | None:
        ...


class ApyClientProtocol(Protocol):
    async def get_apys(self) -> list[ApyRecord]:
        ...
