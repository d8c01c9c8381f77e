from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from loguru import logger
from solana.rpc.async_api import AsyncClient
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    CloseAccountParams,
    close_account,
    get_associated_token_address,
)

from realms_strategies.core.config import get_cluster_name, get_rpc_url
from realms_strategies.core.constants.everlend import Cluster


@dataclass(frozen=True)
class ConnectionContext:
    cluster: Cluster
    current: AsyncClient
    endpoint: str

    @classmethod
    def from_config(cls, cluster_name: str | None = None) -> ConnectionContext:
        name = cluster_name or get_cluster_name()
        endpoint = get_rpc_url(name)
        return cls(
            cluster=Cluster.from_name(name),
            current=AsyncClient(endpoint),
            endpoint=endpoint,
        )


@asynccontextmanager
async def solana_connection(
    cluster_name: str | None = None,
) -> AsyncIterator[ConnectionContext]:
    connection = ConnectionContext.from_config(cluster_name)
    logger.debug(f"Opened Solana RPC connection to {connection.endpoint}")
    try:
        yield connection
    finally:
        await connection.current.close()


def find_associated_token_address(owner: Pubkey, mint: Pubkey | str) -> Pubkey:
    """Associated token account of ``owner`` for ``mint``.

    Owners may be off-curve (governance PDAs); the derivation does not check.
    """
    if isinstance(mint, str):
        mint = Pubkey.from_string(mint)
    return get_associated_token_address(owner, mint)


def close_token_account_instruction(
    account: Pubkey, *, destination: Pubkey, owner: Pubkey
) -> Instruction:
    return close_account(
        CloseAccountParams(
            program_id=TOKEN_PROGRAM_ID,
            account=account,
            dest=destination,
            owner=owner,
            signers=[],
        )
    )
