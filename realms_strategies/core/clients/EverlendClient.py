from __future__ import annotations

from typing import NotRequired, Required, TypedDict

from realms_strategies.core.clients.HttpClient import HttpClient
from realms_strategies.core.config import get_everlend_api_base_url


class ApyRecord(TypedDict):
    token: Required[str]
    supply_apy: Required[float]
    borrow_apy: NotRequired[float]


class EverlendClient(HttpClient):
    """Everlend public API. Responses are never cached; every call hits the network."""

    def __init__(self, *, base_url: str | None = None) -> None:
        super().__init__()
        self._base_url = base_url.rstrip("/") if base_url else None

    @property
    def base_url(self) -> str:
        return self._base_url or get_everlend_api_base_url()

    async def get_apys(self) -> list[ApyRecord]:
        url = f"{self.base_url}/apy"
        response = await self._request("GET", url)
        data = response.json()
        if not isinstance(data, list):
            raise ValueError("Everlend API returned unexpected response type")
        return [d for d in data if isinstance(d, dict)]


EVERLEND_CLIENT = EverlendClient()
