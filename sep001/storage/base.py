from __future__ import annotations

from abc import ABC, abstractmethod

from multiformats import CID


class BlockStore(ABC):
    """
    Content-addressed block source.

    get() must raise NotFoundError when the CID cannot be resolved and
    StorageError for transport or node failures. Implementations must be
    safe to call concurrently from one event loop.
    """

    @abstractmethod
    async def get(self, cid: CID) -> bytes:
        raise NotImplementedError

    async def close(self) -> None:
        return None

    async def __aenter__(self) -> "BlockStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
