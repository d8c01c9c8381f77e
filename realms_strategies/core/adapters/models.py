from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from realms_strategies.core.constants.everlend import (
    EVERLEND,
    EVERLEND_LOGO_SRC,
    EVERLEND_PROTOCOL_SYMBOL,
)
from realms_strategies.core.governance.instruction import InstructionData


class EverlendAction(StrEnum):
    DEPOSIT = "Deposit"
    WITHDRAW = "Withdraw"


class EverlendActionForm(BaseModel):
    action: EverlendAction
    title: str
    description: str = ""
    amount: int = Field(gt=0)
    amount_fmt: str | None = None
    pool_pub_key: str
    token_mint: str
    pool_mint: str

    @field_validator("pool_pub_key", "token_mint", "pool_mint")
    @classmethod
    def _check_pubkey(cls, value: str) -> str:
        try:
            Pubkey.from_string(value)
        except Exception as exc:
            raise ValueError(f"invalid public key {value!r}") from exc
        return value


class InstructionDataWithHoldUpTime(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: InstanceOf[InstructionData] | None
    hold_up_time: int
    prerequisite_instructions: list[InstanceOf[Instruction]] = []
    # Lets the governance UI split the instruction across approval chunks.
    chunk_split_by_default: bool = False


class EverlendStrategy(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    handled_mint: str
    # None when the lister has no transaction builder or proposal creator
    create_proposal_fcn: Callable[..., Awaitable[Any]] | None = None
    protocol_logo_src: str = EVERLEND_LOGO_SRC
    protocol_name: str = EVERLEND
    protocol_symbol: str = EVERLEND_PROTOCOL_SYMBOL
    is_generic_item: bool = False
    pool_mint: str
    pool_pub_key: str
    strategy_description: str = ""
    strategy_name: str = "Deposit"
    handled_token_symbol: str | None = None
    handled_token_img_src: str | None = None
    apy: str
