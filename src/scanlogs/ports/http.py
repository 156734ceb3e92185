# scanlogs/ports/http.py
from __future__ import annotations

from typing import Any, Mapping, Protocol


class HttpGetter(Protocol):
    """Port for the explorer HTTP GET capability."""

    async def get(self, url: str, params: Mapping[str, Any]) -> Any:
        """Return the decoded JSON body. Raise TransportRateLimited on HTTP 429."""
