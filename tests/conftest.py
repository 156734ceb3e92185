from __future__ import annotations

from typing import Any, Mapping

import pytest

from scanlogs.domain.models import ChainEndpoint

CHAIN_ID = 1
ADDRESS = "0xdac17f958d2ee523a2206206994597c13d831ec7"
TRANSFER_T0 = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"


def make_record(i: int = 0, *, block: int = 0x10, topics: list[str] | None = None) -> dict[str, Any]:
    return {
        "address": ADDRESS,
        "topics": topics if topics is not None else [TRANSFER_T0, "", ""],
        "data": "0x" + "00" * 31 + "01",
        "blockNumber": hex(block),
        "blockHash": "0x" + "ab" * 32,
        "timeStamp": "0x65a0f2c0",
        "gasPrice": "0x3b9aca00",
        "gasUsed": "0x5208",
        "logIndex": hex(i),
        "transactionHash": "0x" + f"{i:064x}",
        "transactionIndex": "0x2",
    }


def full_page(start: int = 0, size: int = 1000, **kw: Any) -> list[dict[str, Any]]:
    return [make_record(start + i, **kw) for i in range(size)]


class FakeHttp:
    """Scripted HttpGetter: returns bodies or raises exceptions in order."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def get(self, url: str, params: Mapping[str, Any]) -> Any:
        self.calls.append((url, dict(params)))
        if not self.responses:
            raise AssertionError("unexpected request")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    @property
    def pages(self) -> list[int]:
        return [params["page"] for _, params in self.calls]


@pytest.fixture
def endpoint() -> ChainEndpoint:
    return ChainEndpoint(CHAIN_ID, "etherscan", "https://api.etherscan.io/api", api_key="KEY",
                         requests_per_window=1000, window_s=1.0)
