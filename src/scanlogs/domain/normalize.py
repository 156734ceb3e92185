from __future__ import annotations
from collections.abc import Iterable, Mapping
from typing import Any

from eth_utils import to_checksum_address

from .errors import MalformedResponse
from .models import Log
from .value_types import Address, HexStr, Topic


def _hex_to_uint(value: Any, field: str) -> int:
    """Etherscan encodes zero as a bare "0x"."""
    if value == "0x":
        return 0
    try:
        n = int(value, 16)
    except (TypeError, ValueError) as e:
        raise MalformedResponse(f"Invalid hex value for {field}: {value!r}") from e
    if n < 0:
        raise MalformedResponse(f"Negative value for {field}: {value!r}")
    return n


def normalize_log(record: Mapping[str, Any]) -> Log:
    try:
        address = to_checksum_address(record["address"])
        topics = tuple(Topic(t) for t in record["topics"] if t)
        return Log(
            address=Address(address),
            topics=topics,
            data=HexStr(record["data"]),
            transaction_hash=record["transactionHash"],
            block_number=_hex_to_uint(record["blockNumber"], "blockNumber"),
            transaction_index=_hex_to_uint(record["transactionIndex"], "transactionIndex"),
            log_index=_hex_to_uint(record["logIndex"], "logIndex"),
            timestamp=_hex_to_uint(record["timeStamp"], "timeStamp"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponse(f"Invalid log record: {e}") from e


def normalize_logs(records: Iterable[Mapping[str, Any]]) -> list[Log]:
    return [normalize_log(r) for r in records]
