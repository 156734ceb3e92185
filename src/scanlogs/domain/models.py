from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .value_types import LATEST, Address, BlockRef, HexStr, Topic

MAX_TOPICS = 4


@dataclass(slots=True, frozen=True)
class BlockRange:
    start: int
    end: int


@dataclass(slots=True, frozen=True)
class Filter:
    """Block range and positional topic constraints for one getLogs query.

    `topics[i]` constrains topic i; a None (or empty) entry leaves that slot open.
    """
    from_block: int | None = None
    to_block: int | None = None
    topics: tuple[Any, ...] = field(default=())

    def __post_init__(self) -> None:
        topics = tuple(self.topics)
        if len(topics) > MAX_TOPICS:
            raise ValueError(f"At most {MAX_TOPICS} topics are supported, got {len(topics)}")
        object.__setattr__(self, "topics", topics)

    def resolved_from(self) -> int:
        return 0 if self.from_block is None else self.from_block

    def resolved_to(self) -> BlockRef:
        return LATEST if self.to_block is None else self.to_block

    def is_single_block(self) -> bool:
        return self.resolved_from() == self.resolved_to()


@dataclass(slots=True, frozen=True)
class ChainEndpoint:
    chain_id: int
    identifier: str
    api_url: str
    api_key: str | None = None
    requests_per_window: int = 5
    window_s: float = 1.0


@dataclass(slots=True, frozen=True)
class Log:
    address: Address
    topics: tuple[Topic, ...]
    data: HexStr
    transaction_hash: str
    block_number: int
    transaction_index: int
    log_index: int
    timestamp: int
