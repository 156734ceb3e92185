# scanlogs/ports/storage.py
from __future__ import annotations

from typing import Iterable, Protocol
from ..domain.models import Log


class EventSink(Protocol):
    """Port for writing fetched logs to durable storage (e.g., Parquet)."""

    async def write(self, logs: Iterable[Log]) -> None:
        """Persist the logs, replacing any previous output."""
