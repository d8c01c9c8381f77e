from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from solders.pubkey import Pubkey


T = TypeVar("T")


@dataclass(frozen=True)
class ProgramAccount(Generic[T]):
    pubkey: Pubkey
    account: T


@dataclass(frozen=True)
class GovernanceConfig:
    min_instruction_hold_up_time: int
    max_voting_time: int | None = None


@dataclass(frozen=True)
class GovernanceAccount:
    config: GovernanceConfig | None
    realm: Pubkey | None = None
    governed_account: Pubkey | None = None


@dataclass(frozen=True)
class TokenAccountInfo:
    owner: Pubkey
    mint: Pubkey | None = None
    amount: int = 0


@dataclass(frozen=True)
class TokenExtension:
    account: TokenAccountInfo | None = None


@dataclass(frozen=True)
class AssetExtensions:
    token: TokenExtension | None = None


@dataclass(frozen=True)
class AssetAccount:
    """A treasury account as seen by the DAO UI.

    ``is_sol`` marks a native SOL treasury whose own address holds the funds;
    otherwise the funds live in an SPL token account described by
    ``extensions.token``.
    """

    pubkey: Pubkey
    governance: ProgramAccount[GovernanceAccount] | None
    is_sol: bool = False
    extensions: AssetExtensions = field(default_factory=AssetExtensions)


# Passed through to the proposal creator untouched.
Realm = ProgramAccount[Any]
TokenOwnerRecord = ProgramAccount[Any]
