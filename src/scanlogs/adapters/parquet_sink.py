from __future__ import annotations
import os, pyarrow as pa, pyarrow.parquet as pq
from typing import Iterable

from ..ports.storage import EventSink
from ..domain.models import Log

LOG_SCHEMA = pa.schema([
    ("address", pa.string()),
    ("topics", pa.list_(pa.string())),
    ("data", pa.large_string()),
    ("transaction_hash", pa.string()),
    ("block_number", pa.int64()),
    ("transaction_index", pa.int32()),
    ("log_index", pa.int32()),
    ("timestamp", pa.int64()),
])

def logs_to_table(logs: Iterable[Log]) -> pa.Table:
    evs = list(logs)
    return pa.Table.from_arrays(
        arrays=[
            pa.array([e.address for e in evs], pa.string()),
            pa.array([list(e.topics) for e in evs], pa.list_(pa.string())),
            pa.array([e.data for e in evs], pa.large_string()),
            pa.array([e.transaction_hash for e in evs], pa.string()),
            pa.array([e.block_number for e in evs], pa.int64()),
            pa.array([e.transaction_index for e in evs], pa.int32()),
            pa.array([e.log_index for e in evs], pa.int32()),
            pa.array([e.timestamp for e in evs], pa.int64()),
        ],
        schema=LOG_SCHEMA,
    )

class ParquetLogSink(EventSink):
    def __init__(self, path: str, codec: str = "snappy") -> None:
        self.path = path
        self.codec = codec
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    async def write(self, logs: Iterable[Log]) -> None:
        tmp = self.path + ".tmp"
        pq.write_table(logs_to_table(logs), tmp, compression=self.codec, use_dictionary=True)
        os.replace(tmp, self.path)
