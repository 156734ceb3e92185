from __future__ import annotations
import httpx
from typing import Any, Mapping

from ..domain.errors import MalformedResponse, TransportRateLimited
from ..ports.http import HttpGetter


class HttpxGetter(HttpGetter):
    def __init__(self, timeout_s: int = 20, max_conn: int = 64, *,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.client = httpx.AsyncClient(
            http2=True,
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=max_conn, max_keepalive_connections=max(1, max_conn//2)),
            transport=transport,
        )

    async def get(self, url: str, params: Mapping[str, Any]) -> Any:
        clean = {k: v for k, v in params.items() if v is not None}
        r = await self.client.get(url, params=clean)
        # some Blockscout instances answer 429 instead of the in-body rate limit message
        if r.status_code == 429:
            raise TransportRateLimited(f"HTTP 429 from {url}")
        r.raise_for_status()
        try:
            return r.json()
        except ValueError as e:
            raise MalformedResponse(f"Non-JSON response from {url}: {r.text[:200]!r}") from e

    async def aclose(self) -> None:
        await self.client.aclose()
