"""
sep001/decoder/compact.py

SEP-001 Compact decoder.

    root CID ──fetch──▶ compact token ──verify──▶ {header, s/d/t CIDs}
             ──resolve (3 concurrent fetches)──▶ DecodedEnvelope

See https://github.com/SynapseMedia/sep/blob/main/SEP/SEP-001.md
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from sep001.core.cid import CIDLike
from sep001.core.exceptions import DecodeError
from sep001.core.models import DecodedEnvelope
from sep001.decoder.claims import ClaimsResolver
from sep001.decoder.fetcher import Fetcher
from sep001.decoder.verifier import Verifier
from sep001.storage.base import BlockStore

logger = logging.getLogger(__name__)


class CompactDecoder:
    """
    Decodes SEP-001 Compact envelopes from a block store.

    Usage:
        async with MemoryBlockStore() as store:
            decoder = create_compact(store)
            envelope = await decoder.decode(root_cid)

    Closing the decoder closes its store:
        async with DecoderConfig().build_decoder() as decoder:
            envelope = await decoder.decode(root_cid)
    """

    def __init__(
        self,
        store: BlockStore,
        algorithms: Optional[Iterable[str]] = None,
    ) -> None:
        self.store    = store
        self.fetcher  = Fetcher(store)
        self.verifier = Verifier(algorithms)
        self.resolver = ClaimsResolver(self.fetcher)

    async def decode(self, root_cid: CIDLike) -> DecodedEnvelope:
        """
        Fetch, verify and resolve the envelope at root_cid.

        Raises one DecodeError subclass on any failure. Never returns a
        partial result.
        """
        try:
            raw_token = await self.fetcher.fetch(root_cid)
            token     = self.verifier.verify(raw_token)
            payload   = await self.resolver.resolve_claims(token.payload)
        except DecodeError as exc:
            logger.warning(
                "Decode of %s failed: %s: %s", root_cid, type(exc).__name__, exc
            )
            raise

        logger.info("Decoded SEP-001 envelope %s (alg=%s)", root_cid, token.header.get("alg"))
        return DecodedEnvelope(header=token.header, payload=payload)

    def decode_sync(self, root_cid: CIDLike) -> DecodedEnvelope:
        """Run decode() on a fresh event loop. Not for use inside a running loop."""
        return asyncio.run(self.decode(root_cid))

    async def close(self) -> None:
        """Close the underlying block store."""
        await self.store.close()

    async def __aenter__(self) -> "CompactDecoder":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def create_compact(
    store: BlockStore,
    algorithms: Optional[Iterable[str]] = None,
) -> CompactDecoder:
    """Create a Compact decoder reading from the given block store."""
    return CompactDecoder(store, algorithms=algorithms)
