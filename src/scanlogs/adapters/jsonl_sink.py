from __future__ import annotations
import os, json
from dataclasses import asdict
from typing import IO, Iterable

from ..ports.storage import EventSink
from ..domain.models import Log

def log_to_json_line(ev: Log) -> str:
    return json.dumps(asdict(ev), separators=(",", ":")) + "\n"

class JSONLLogSink(EventSink):
    """Writes one JSON object per log to `path`, or to an open text stream."""
    def __init__(self, path: str | None = None, stream: IO[str] | None = None) -> None:
        if (path is None) == (stream is None):
            raise ValueError("Pass exactly one of path or stream")
        self.path = path
        self.stream = stream
        if path:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    async def write(self, logs: Iterable[Log]) -> None:
        if self.stream is not None:
            for ev in logs:
                self.stream.write(log_to_json_line(ev))
            self.stream.flush()
            return
        tmp = self.path + ".tmp"
        with open(tmp, "w") as f:
            for ev in logs:
                f.write(log_to_json_line(ev))
        os.replace(tmp, self.path)
