from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger
from solana.rpc.types import MemcmpOpts
from solders.pubkey import Pubkey

from realms_strategies.core.constants.everlend import (
    EVERLEND_GENERAL_POOL_PROGRAM_ID,
    POOL_ACCOUNT_TYPE,
    POOL_MARKET_OFFSET,
)

_PUBKEY_LEN = 32
_POOL_HEADER_LEN = 1 + 4 * _PUBKEY_LEN


@dataclass(frozen=True)
class Pool:
    public_key: Pubkey
    pool_market: Pubkey
    token_mint: Pubkey
    pool_mint: Pubkey
    token_account: Pubkey

    @classmethod
    def decode(cls, public_key: Pubkey, data: bytes) -> Pool:
        if len(data) < _POOL_HEADER_LEN:
            raise ValueError(
                f"pool account {public_key} too short: {len(data)} bytes"
            )
        if data[0] != POOL_ACCOUNT_TYPE:
            raise ValueError(
                f"account {public_key} is not a pool (account_type={data[0]})"
            )

        def key(index: int) -> Pubkey:
            start = 1 + index * _PUBKEY_LEN
            return Pubkey.from_bytes(data[start : start + _PUBKEY_LEN])

        return cls(
            public_key=public_key,
            pool_market=key(0),
            token_mint=key(1),
            pool_mint=key(2),
            token_account=key(3),
        )


class GeneralPoolClient:
    """Reads Everlend general-pool accounts straight from RPC."""

    def __init__(self, program_id: Pubkey = EVERLEND_GENERAL_POOL_PROGRAM_ID):
        self.program_id = program_id

    async def find_pools(self, connection: Any, *, pool_market: Pubkey) -> list[Pool]:
        resp = await connection.get_program_accounts(
            self.program_id,
            encoding="base64",
            filters=[MemcmpOpts(offset=POOL_MARKET_OFFSET, bytes=str(pool_market))],
        )
        pools: list[Pool] = []
        for keyed in resp.value:
            data = bytes(keyed.account.data)
            if not data or data[0] != POOL_ACCOUNT_TYPE:
                logger.debug(f"Skipping non-pool account {keyed.pubkey}")
                continue
            if len(data) < _POOL_HEADER_LEN:
                logger.debug(f"Skipping truncated pool account {keyed.pubkey}")
                continue
            pools.append(Pool.decode(keyed.pubkey, data))
        return pools


GENERAL_POOL_CLIENT = GeneralPoolClient()
