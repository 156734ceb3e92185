from __future__ import annotations
from typing import Literal, NewType, Union

Address = NewType("Address", str)   # EIP-55 checksum, 0x-prefixed
Topic   = NewType("Topic", str)     # 0x-prefixed 32-byte hash
HexStr  = NewType("HexStr", str)    # opaque 0x-prefixed payload
BlockTag = Literal["latest"]
BlockRef = Union[int, BlockTag]

LATEST: BlockTag = "latest"
