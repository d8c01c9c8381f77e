import time
from typing import Any

import httpx
from loguru import logger

from realms_strategies.core.constants.base import DEFAULT_HTTP_TIMEOUT


class HttpClient:
    def __init__(self, *, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self.headers = {
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        logger.debug(f"Making {method} request to {url}")
        start_time = time.time()

        merged_headers = dict(self.headers)
        if headers:
            merged_headers.update(headers)
        resp = await self.client.request(method, url, headers=merged_headers, **kwargs)

        elapsed = time.time() - start_time
        if resp.status_code >= 400:
            logger.warning(
                f"HTTP {resp.status_code} response for {method} {url} after {elapsed:.2f}s"
            )
        else:
            logger.debug(
                f"HTTP {resp.status_code} response for {method} {url} after {elapsed:.2f}s"
            )

        resp.raise_for_status()
        return resp

    async def close(self) -> None:
        await self.client.aclose()
