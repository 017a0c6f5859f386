from __future__ import annotations

import asyncio
from collections import Counter
from typing import Dict, Optional

from multiformats import CID

from sep001.core.cid import CIDLike, cid_for_bytes, parse_cid
from sep001.core.exceptions import NotFoundError
from sep001.storage.base import BlockStore


class MemoryBlockStore(BlockStore):
    """
    In-process block store.

    Keeps a per-CID request counter so callers can assert how many times
    each block was asked for. An optional delay makes every get() yield to
    the event loop, which lets concurrent fetches actually interleave.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self._blocks: Dict[str, bytes] = {}
        self.delay = delay
        self.requests: Counter = Counter()

    def put(self, data: bytes) -> CID:
        cid = cid_for_bytes(data)
        self._blocks[str(cid)] = bytes(data)
        return cid

    def put_at(self, cid: CIDLike, data: bytes) -> CID:
        cid = parse_cid(cid)
        self._blocks[str(cid)] = bytes(data)
        return cid

    def remove(self, cid: CIDLike) -> None:
        self._blocks.pop(str(parse_cid(cid)), None)

    @property
    def total_requests(self) -> int:
        return sum(self.requests.values())

    def count(self, cid: Optional[CIDLike] = None) -> int:
        if cid is None:
            return self.total_requests
        return self.requests[str(parse_cid(cid))]

    async def get(self, cid: CID) -> bytes:
        key = str(cid)
        self.requests[key] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        try:
            return self._blocks[key]
        except KeyError:
            raise NotFoundError("Block not found", cid=key) from None

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, cid: CIDLike) -> bool:
        return str(parse_cid(cid)) in self._blocks
