from __future__ import annotations

import asyncio
from typing import NotRequired, Required, TypedDict

from loguru import logger

from realms_strategies.core.clients.HttpClient import HttpClient
from realms_strategies.core.config import get_token_list_url
from realms_strategies.core.constants.base import TOKEN_LIST_CHAIN_ID_MAINNET


class TokenExtensions(TypedDict, total=False):
    coingeckoId: str
    website: str
    twitter: str


class TokenInfo(TypedDict):
    chainId: Required[int]
    address: Required[str]
    symbol: Required[str]
    name: NotRequired[str]
    decimals: NotRequired[int]
    logoURI: NotRequired[str]
    tags: NotRequired[list[str]]
    extensions: NotRequired[TokenExtensions]


class TokenListClient(HttpClient):
    """Token metadata keyed by mint address.

    The list is fetched once, on the first ``ensure_loaded`` call, and then served
    from memory. Lookups are synchronous so they can run inside a plain loop.
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        chain_id: int = TOKEN_LIST_CHAIN_ID_MAINNET,
    ) -> None:
        super().__init__()
        self._url = url
        self.chain_id = chain_id
        self._tokens: dict[str, TokenInfo] | None = None
        self._lock = asyncio.Lock()

    @property
    def url(self) -> str:
        return self._url or get_token_list_url()

    @property
    def loaded(self) -> bool:
        return self._tokens is not None

    async def ensure_loaded(self) -> None:
        if self._tokens is not None:
            return
        async with self._lock:
            if self._tokens is not None:
                return
            response = await self._request("GET", self.url)
            data = response.json()
            tokens = data.get("tokens", []) if isinstance(data, dict) else data
            if not isinstance(tokens, list):
                raise ValueError("Token list returned unexpected response type")
            self._tokens = self._index(tokens)
            logger.debug(
                f"Loaded {len(self._tokens)} tokens for chain {self.chain_id}"
            )

    def _index(self, tokens: list[dict]) -> dict[str, TokenInfo]:
        by_mint: dict[str, TokenInfo] = {}
        for token in tokens:
            if not isinstance(token, dict) or not token.get("address"):
                continue
            if int(token.get("chainId", self.chain_id)) != self.chain_id:
                continue
            # first entry wins
            by_mint.setdefault(str(token["address"]), token)  # type: ignore[arg-type]
        return by_mint

    def set_tokens(self, tokens: list[TokenInfo]) -> None:
        self._tokens = self._index(list(tokens))

    def get_token_info(self, mint: str) -> TokenInfo | None:
        if self._tokens is None:
            return None
        return self._tokens.get(str(mint))


TOKEN_LIST_CLIENT = TokenListClient()
