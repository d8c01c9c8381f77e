from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from realms_strategies.adapters.everlend_adapter.pool import GENERAL_POOL_CLIENT
from realms_strategies.core.adapters.BaseAdapter import BaseAdapter
from realms_strategies.core.adapters.decorators import status_tuple
from realms_strategies.core.adapters.models import (
    EverlendAction,
    EverlendActionForm,
    EverlendStrategy,
    InstructionDataWithHoldUpTime,
)
from realms_strategies.core.clients.EverlendClient import EVERLEND_CLIENT, ApyRecord
from realms_strategies.core.clients.protocols import (
    ApyClientProtocol,
    PoolClientProtocol,
    PoolTransactionBuilderProtocol,
    ProposalCreatorProtocol,
    TokenInfoProviderProtocol,
)
from realms_strategies.core.clients.TokenListClient import TOKEN_LIST_CLIENT
from realms_strategies.core.constants.base import ADAPTER_EVERLEND
from realms_strategies.core.constants.everlend import get_everlend_addresses
from realms_strategies.core.governance.instruction import (
    get_instruction_data_from_base64,
    serialize_instruction_to_base64,
)
from realms_strategies.core.governance.models import (
    AssetAccount,
    Realm,
    TokenOwnerRecord,
)
from realms_strategies.core.utils.solana import (
    ConnectionContext,
    close_token_account_instruction,
    find_associated_token_address,
)


class EverlendError(ValueError):
    pass


class InvalidTreasuryConfigurationError(EverlendError):
    pass


@dataclass(frozen=True)
class TreasuryContext:
    owner: Pubkey
    governance: Pubkey
    hold_up_time: int
    is_sol: bool


@dataclass
class EverlendInstructionSet:
    setup: list[InstructionDataWithHoldUpTime] = field(default_factory=list)
    action: list[InstructionDataWithHoldUpTime] = field(default_factory=list)
    cleanup: list[InstructionDataWithHoldUpTime] = field(default_factory=list)

    def all(self) -> list[InstructionDataWithHoldUpTime]:
        # governance executes in submission order
        return [*self.setup, *self.action, *self.cleanup]


def validate_treasury(treasury: AssetAccount) -> TreasuryContext:
    """Resolve who owns the treasury funds and the governance hold-up time.

    Raises ``InvalidTreasuryConfigurationError`` when the treasury lacks the
    governance config, or, for token treasuries, the token account owner.
    """
    governance = treasury.governance
    if governance is None or governance.account is None:
        raise InvalidTreasuryConfigurationError(
            f"treasury {treasury.pubkey} has no governance account"
        )
    config = governance.account.config
    if config is None:
        raise InvalidTreasuryConfigurationError(
            f"governance {governance.pubkey} has no config"
        )

    if treasury.is_sol:
        owner = treasury.pubkey
    else:
        token = treasury.extensions.token if treasury.extensions else None
        if token is None or token.account is None or token.account.owner is None:
            raise InvalidTreasuryConfigurationError(
                f"treasury {treasury.pubkey} is neither SOL nor a token account"
            )
        owner = token.account.owner

    return TreasuryContext(
        owner=owner,
        governance=governance.pubkey,
        hold_up_time=int(config.min_instruction_hold_up_time),
        is_sol=treasury.is_sol,
    )


def find_supply_apy(apys: Sequence[ApyRecord], symbol: str | None) -> float:
    """Supply APY in percent for ``symbol``; 0 when unknown.

    A strategy is still listed without APY data, it just shows 0.00%.
    """
    if not symbol:
        return 0.0
    record = next((a for a in apys if a.get("token") == symbol), None)
    if record is None:
        return 0.0
    value = record.get("supply_apy")
    if isinstance(value, bool):
        return 0.0
    try:
        apy = float(value) * 100
    except (TypeError, ValueError):
        return 0.0
    return apy if math.isfinite(apy) else 0.0


def format_apy(apy: float) -> str:
    return f"{apy:.2f}%"


def wrap_instructions(
    instructions: Sequence[Instruction],
    *,
    hold_up_time: int,
    chunk_split_by_default: bool = False,
) -> list[InstructionDataWithHoldUpTime]:
    return [
        InstructionDataWithHoldUpTime(
            data=get_instruction_data_from_base64(serialize_instruction_to_base64(ix)),
            hold_up_time=hold_up_time,
            prerequisite_instructions=[],
            chunk_split_by_default=chunk_split_by_default,
        )
        for ix in instructions
    ]


class EverlendAdapter(BaseAdapter):
    adapter_type = ADAPTER_EVERLEND

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        pool_client: PoolClientProtocol | None = None,
        transaction_builder: PoolTransactionBuilderProtocol | None = None,
        proposal_creator: ProposalCreatorProtocol | None = None,
        token_client: TokenInfoProviderProtocol | None = None,
        apy_client: ApyClientProtocol | None = None,
    ) -> None:
        super().__init__("everlend_adapter", config)
        self.pool_client = pool_client or GENERAL_POOL_CLIENT
        self.transaction_builder = transaction_builder
        self.proposal_creator = proposal_creator
        self.token_client = token_client or TOKEN_LIST_CLIENT
        self.apy_client = apy_client or EVERLEND_CLIENT

    @property
    def can_submit(self) -> bool:
        return (
            self.transaction_builder is not None and self.proposal_creator is not None
        )

    @status_tuple
    async def get_strategies(
        self, connection: ConnectionContext
    ) -> list[EverlendStrategy]:
        market = get_everlend_addresses(connection.cluster).market
        pools = await self.pool_client.find_pools(
            connection.current, pool_market=market
        )
        apys = await self.apy_client.get_apys()
        await self._load_token_metadata()
        handler = self.handle_everlend_action if self.can_submit else None

        strategies: list[EverlendStrategy] = []
        for pool in pools:
            token_info = self.token_client.get_token_info(str(pool.token_mint))
            symbol = token_info.get("symbol") if token_info else None
            strategies.append(
                EverlendStrategy(
                    handled_mint=str(pool.token_mint),
                    create_proposal_fcn=handler,
                    pool_mint=str(pool.pool_mint),
                    pool_pub_key=str(pool.public_key),
                    handled_token_symbol=symbol,
                    handled_token_img_src=token_info.get("logoURI")
                    if token_info
                    else None,
                    apy=format_apy(find_supply_apy(apys, symbol)),
                )
            )
        self.logger.debug(
            f"Found {len(strategies)} Everlend strategies on {connection.cluster.value}"
        )
        return strategies

    async def _load_token_metadata(self) -> None:
        try:
            await self.token_client.ensure_loaded()
        except Exception as exc:  # noqa: BLE001 - metadata only decorates strategies
            self.logger.warning(f"Token metadata unavailable: {exc}")

    async def build_everlend_instructions(
        self,
        form: EverlendActionForm,
        matched_treasury: AssetAccount,
        connection: ConnectionContext,
    ) -> EverlendInstructionSet:
        treasury = validate_treasury(matched_treasury)
        builder = self.transaction_builder
        if builder is None:
            raise InvalidTreasuryConfigurationError(
                "no Everlend transaction builder configured"
            )

        registry = get_everlend_addresses(connection.cluster).registry
        pool = Pubkey.from_string(form.pool_pub_key)
        token_ata = find_associated_token_address(treasury.owner, form.token_mint)
        pool_token_ata = find_associated_token_address(treasury.owner, form.pool_mint)

        instructions = EverlendInstructionSet()
        if form.action == EverlendAction.DEPOSIT:
            if treasury.is_sol:
                deposit_ixs = await builder.prepare_sol_deposit_tx(
                    connection,
                    payer=treasury.owner,
                    pool=pool,
                    registry=registry,
                    amount=form.amount,
                    source=token_ata,
                    destination=pool_token_ata,
                )
            else:
                deposit_ixs = await builder.prepare_deposit_tx(
                    connection,
                    payer=treasury.owner,
                    pool=pool,
                    registry=registry,
                    amount=form.amount,
                    source=token_ata,
                )
            instructions.action.extend(
                wrap_instructions(deposit_ixs, hold_up_time=treasury.hold_up_time)
            )
        elif form.action == EverlendAction.WITHDRAW:
            withdrawal_ixs = await builder.prepare_withdrawal_request_tx(
                connection,
                payer=treasury.owner,
                pool=pool,
                registry=registry,
                amount=form.amount,
                source=pool_token_ata,
                destination=treasury.owner if treasury.is_sol else None,
            )
            instructions.action.extend(
                wrap_instructions(
                    withdrawal_ixs,
                    hold_up_time=treasury.hold_up_time,
                    chunk_split_by_default=True,
                )
            )
            if treasury.is_sol:
                # return the wrapped SOL account's lamports to the treasury
                close_ix = close_token_account_instruction(
                    token_ata, destination=treasury.owner, owner=treasury.owner
                )
                instructions.cleanup.extend(
                    wrap_instructions(
                        [close_ix],
                        hold_up_time=treasury.hold_up_time,
                        chunk_split_by_default=True,
                    )
                )

        return instructions

    async def handle_everlend_action(
        self,
        rpc_context: Any,
        form: EverlendActionForm,
        realm: Realm,
        matched_treasury: AssetAccount,
        token_owner_record: TokenOwnerRecord,
        governing_token_mint: Pubkey,
        proposal_index: int,
        is_draft: bool,
        connection: ConnectionContext,
        client: Any | None = None,
    ) -> Pubkey:
        treasury = validate_treasury(matched_treasury)
        if self.proposal_creator is None:
            raise InvalidTreasuryConfigurationError("no proposal creator configured")

        instructions = await self.build_everlend_instructions(
            form, matched_treasury, connection
        )
        self.logger.info(
            f"Creating Everlend {form.action.value} proposal with "
            f"{len(instructions.all())} instructions for {treasury.owner}"
        )
        return await self.proposal_creator(
            rpc_context,
            realm,
            treasury.governance,
            token_owner_record,
            form.title,
            form.description,
            governing_token_mint,
            proposal_index,
            instructions.all(),
            is_draft,
            client,
        )


async def get_everlend_strategies(
    connection: ConnectionContext,
    *,
    transaction_builder: PoolTransactionBuilderProtocol | None = None,
    proposal_creator: ProposalCreatorProtocol | None = None,
) -> list[EverlendStrategy] | None:
    adapter = EverlendAdapter(
        transaction_builder=transaction_builder,
        proposal_creator=proposal_creator,
    )
    ok, result = await adapter.get_strategies(connection)
    if not ok:
        logger.error(f"Failed to list Everlend strategies: {result}")
        return None
    return result


async def handle_everlend_action(
    rpc_context: Any,
    form: EverlendActionForm,
    realm: Realm,
    matched_treasury: AssetAccount,
    token_owner_record: TokenOwnerRecord,
    governing_token_mint: Pubkey,
    proposal_index: int,
    is_draft: bool,
    connection: ConnectionContext,
    client: Any | None = None,
    *,
    transaction_builder: PoolTransactionBuilderProtocol,
    proposal_creator: ProposalCreatorProtocol,
) -> Pubkey:
    adapter = EverlendAdapter(
        transaction_builder=transaction_builder,
        proposal_creator=proposal_creator,
    )
    return await adapter.handle_everlend_action(
        rpc_context,
        form,
        realm,
        matched_treasury,
        token_owner_record,
        governing_token_mint,
        proposal_index,
        is_draft,
        connection,
        client,
    )
