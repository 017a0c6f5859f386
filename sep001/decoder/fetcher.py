from __future__ import annotations

import logging

from sep001.core.cid import CIDLike, parse_cid
from sep001.core.exceptions import NotFoundError, StorageError
from sep001.storage.base import BlockStore

logger = logging.getLogger(__name__)


class Fetcher:
    """
    Single path from a CID to raw bytes.

    Passes NotFoundError and StorageError through, and folds anything
    else a store raises into StorageError.
    """

    def __init__(self, store: BlockStore) -> None:
        self.store = store

    async def fetch(self, cid: CIDLike) -> bytes:
        cid = parse_cid(cid)
        logger.debug("Fetching block %s", cid)
        try:
            block = await self.store.get(cid)
        except (NotFoundError, StorageError):
            raise
        except Exception as exc:
            raise StorageError(f"Block store failed: {exc}", cid=str(cid)) from exc
        return bytes(block)
