from __future__ import annotations
from ..domain.models import BlockRange

def plan_chunks(start_block: int, end_block: int, step: int) -> list[BlockRange]:
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    out: list[BlockRange] = []
    b = start_block
    while b <= end_block:
        fb, tb = b, min(end_block, b + step - 1)
        out.append(BlockRange(start=fb, end=tb))
        b = tb + 1
    return out
