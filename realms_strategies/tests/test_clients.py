from unittest.mock import AsyncMock, patch

import httpx
import pytest

from realms_strategies.core.clients.EverlendClient import EverlendClient
from realms_strategies.core.clients.TokenListClient import TokenListClient
from realms_strategies.core.constants.base import (
    DEFAULT_HTTP_TIMEOUT,
    TOKEN_LIST_CHAIN_ID_DEVNET,
)


def _response(method: str, url: str, status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request(method, url), **kwargs)


class TestEverlendClient:
    def test_timeout(self):
        client = EverlendClient()
        assert client.client.timeout.read == DEFAULT_HTTP_TIMEOUT

    @pytest.mark.asyncio
    async def test_get_apys(self):
        client = EverlendClient(base_url="https://api.everlend.invalid/api/v1/")
        payload = [
            {"token": "USDC", "supply_apy": 0.0432},
            {"token": "SOL", "supply_apy": 0.01},
            "garbage",
        ]
        request = AsyncMock(
            return_value=_response(
                "GET", "https://api.everlend.invalid/api/v1/apy", json=payload
            )
        )

        with patch.object(client.client, "request", request):
            apys = await client.get_apys()

        assert apys == payload[:2]
        method, url = request.await_args.args
        assert method == "GET"
        assert url == "https://api.everlend.invalid/api/v1/apy"

    @pytest.mark.asyncio
    async def test_get_apys_unexpected_shape(self):
        client = EverlendClient(base_url="https://api.everlend.invalid")
        request = AsyncMock(
            return_value=_response(
                "GET", "https://api.everlend.invalid/apy", json={"error": "nope"}
            )
        )

        with patch.object(client.client, "request", request):
            with pytest.raises(ValueError, match="unexpected response type"):
                await client.get_apys()

    @pytest.mark.asyncio
    async def test_get_apys_http_error(self):
        client = EverlendClient(base_url="https://api.everlend.invalid")
        request = AsyncMock(
            return_value=_response("GET", "https://api.everlend.invalid/apy", 500)
        )

        with patch.object(client.client, "request", request):
            with pytest.raises(httpx.HTTPStatusError):
                await client.get_apys()


class TestTokenListClient:
    TOKENS = {
        "name": "Solana Token List",
        "tokens": [
            {
                "chainId": 101,
                "address": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                "symbol": "USDC",
                "logoURI": "https://logos.invalid/usdc.png",
            },
            {
                "chainId": 103,
                "address": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                "symbol": "devUSDC",
            },
            {
                "chainId": 101,
                "address": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                "symbol": "DUPLICATE",
            },
            {"chainId": 101, "symbol": "NOADDR"},
        ],
    }

    def test_lookup_before_load(self):
        client = TokenListClient(url="https://tokens.invalid/list.json")
        assert client.get_token_info("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v") is None

    @pytest.mark.asyncio
    async def test_ensure_loaded_fetches_once(self):
        client = TokenListClient(url="https://tokens.invalid/list.json")
        request = AsyncMock(
            return_value=_response(
                "GET", "https://tokens.invalid/list.json", json=self.TOKENS
            )
        )

        with patch.object(client.client, "request", request):
            await client.ensure_loaded()
            await client.ensure_loaded()

        assert request.await_count == 1
        assert client.loaded
        info = client.get_token_info("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
        assert info["symbol"] == "USDC"
        assert info["logoURI"] == "https://logos.invalid/usdc.png"
        assert client.get_token_info("So11111111111111111111111111111111111111112") is None

    @pytest.mark.asyncio
    async def test_devnet_chain_filter(self):
        client = TokenListClient(
            url="https://tokens.invalid/list.json", chain_id=TOKEN_LIST_CHAIN_ID_DEVNET
        )
        request = AsyncMock(
            return_value=_response(
                "GET", "https://tokens.invalid/list.json", json=self.TOKENS
            )
        )

        with patch.object(client.client, "request", request):
            await client.ensure_loaded()

        info = client.get_token_info("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
        assert info["symbol"] == "devUSDC"

    @pytest.mark.asyncio
    async def test_failed_load_can_be_retried_later(self):
        client = TokenListClient(url="https://tokens.invalid/list.json")
        request = AsyncMock(
            return_value=_response("GET", "https://tokens.invalid/list.json", 502)
        )

        with patch.object(client.client, "request", request):
            with pytest.raises(httpx.HTTPStatusError):
                await client.ensure_loaded()

        assert not client.loaded

    def test_set_tokens(self):
        client = TokenListClient()
        client.set_tokens(self.TOKENS["tokens"])
        assert client.loaded
        info = client.get_token_info("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
        assert info["symbol"] == "USDC"
