from __future__ import annotations
import asyncio
import logging
from typing import Any, Callable, Sequence

from ..domain.models import BlockRange, Filter, Log
from ..ports.explorer import EventGetter
from ..ports.storage import EventSink
from .planning import plan_chunks

log = logging.getLogger(__name__)


def _sort_key(ev: Log) -> tuple[int, int, int]:
    return ev.block_number, ev.transaction_index, ev.log_index


async def fetch_range(
    *,
    getter: EventGetter,
    chain_id: int,
    topics: Sequence[Any],
    start_block: int, end_block: int,
    step: int,
    concurrency: int,
    sink: EventSink | None = None,
    on_chunk: Callable[[BlockRange, int], None] | None = None,
) -> tuple[list[Log], dict[str, int]]:
    """
    Fetch [start_block, end_block] in fixed-size chunks, `concurrency` at a time.

    Chunks are not split further: a ResultSizeExceeded from any chunk cancels
    the rest and propagates. Returns the logs sorted by position plus run stats.
    """
    if start_block > end_block:
        raise ValueError(f"start_block ({start_block}) must be <= end_block ({end_block})")
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")
    chunks = plan_chunks(start_block, end_block, step)
    sem = asyncio.Semaphore(concurrency)

    async def run_chunk(chunk: BlockRange) -> list[Log]:
        async with sem:
            logs = await getter.get_events(chain_id, Filter(chunk.start, chunk.end, tuple(topics)))
        log.debug("chunk %d-%d: %d logs", chunk.start, chunk.end, len(logs))
        if on_chunk is not None:
            on_chunk(chunk, len(logs))
        return logs

    tasks = [asyncio.create_task(run_chunk(c)) for c in chunks]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for t in tasks:
            t.cancel()
        raise

    logs = sorted((ev for chunk_logs in results for ev in chunk_logs), key=_sort_key)
    if sink is not None:
        await sink.write(logs)
    stats = {
        "chunks": len(chunks),
        "blocks": end_block - start_block + 1,
        "total_logs": len(logs),
    }
    return logs, stats
