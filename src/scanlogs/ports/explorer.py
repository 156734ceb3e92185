# scanlogs/ports/explorer.py
from __future__ import annotations

from typing import Protocol
from ..domain.models import Filter, Log


class EventGetter(Protocol):
    """Port defining the contract for a block-explorer logs client."""

    async def get_events(self, chain_id: int, filter: Filter, page: int = 1) -> list[Log]:
        """Return normalized logs in explorer order.

        Raises ResultSizeExceeded when the caller must shrink the block range.
        """
