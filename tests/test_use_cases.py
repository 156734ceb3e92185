import asyncio

import pytest

from scanlogs.application.use_cases import fetch_range
from scanlogs.domain.errors import ResultSizeExceeded
from scanlogs.domain.models import Filter, Log
from scanlogs.domain.normalize import normalize_log

from conftest import TRANSFER_T0, make_record


class FakeGetter:
    def __init__(self, fail_on: int | None = None) -> None:
        self.filters: list[Filter] = []
        self.fail_on = fail_on

    async def get_events(self, chain_id: int, filter: Filter, page: int = 1) -> list[Log]:
        self.filters.append(filter)
        if filter.from_block == self.fail_on:
            raise ResultSizeExceeded(from_block=filter.from_block, to_block=filter.to_block)
        # later chunks finish first
        await asyncio.sleep(0.001 * (100 - filter.from_block))
        return [normalize_log(make_record(1, block=filter.to_block)), normalize_log(make_record(0, block=filter.from_block))]


class ListSink:
    def __init__(self) -> None:
        self.logs: list[Log] = []

    async def write(self, logs):
        self.logs = list(logs)


async def test_fetch_range_chunks_sorts_and_writes():
    getter, sink, seen = FakeGetter(), ListSink(), []
    logs, stats = await fetch_range(
        getter=getter, chain_id=1, topics=[TRANSFER_T0],
        start_block=10, end_block=39, step=10, concurrency=2,
        sink=sink, on_chunk=lambda chunk, n: seen.append((chunk.start, n)),
    )
    assert sorted((f.from_block, f.to_block) for f in getter.filters) == [(10, 19), (20, 29), (30, 39)]
    assert all(f.topics == (TRANSFER_T0,) for f in getter.filters)
    assert [ev.block_number for ev in logs] == [10, 19, 20, 29, 30, 39]
    assert sink.logs == logs
    assert stats == {"chunks": 3, "blocks": 30, "total_logs": 6}
    assert sorted(seen) == [(10, 2), (20, 2), (30, 2)]


async def test_fetch_range_propagates_size_errors():
    with pytest.raises(ResultSizeExceeded):
        await fetch_range(getter=FakeGetter(fail_on=20), chain_id=1, topics=[],
                          start_block=10, end_block=39, step=10, concurrency=3)


async def test_fetch_range_rejects_reversed_range():
    with pytest.raises(ValueError):
        await fetch_range(getter=FakeGetter(), chain_id=1, topics=[],
                          start_block=5, end_block=1, step=10, concurrency=1)


async def test_fetch_range_rejects_zero_concurrency():
    getter = FakeGetter()
    with pytest.raises(ValueError, match="concurrency"):
        await fetch_range(getter=getter, chain_id=1, topics=[],
                          start_block=1, end_block=5, step=10, concurrency=0)
    assert getter.filters == []
