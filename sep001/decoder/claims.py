"""
sep001/decoder/claims.py

Claims Resolver: turns the verified payload's s, d, t CIDs into documents.

Ordering (locked):
    1. presence of ALL three claims is checked
    2. ALL three values are parsed as CIDs
    3. only then are the three documents fetched, concurrently

A failure in step 1 or 2 therefore costs zero fetches.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Mapping

from multiformats import CID

from sep001.core.cid import parse_cid
from sep001.core.exceptions import ClaimFormatError, MissingClaimError
from sep001.core.models import CLAIM_FIELDS, Payload
from sep001.decoder.fetcher import Fetcher

logger = logging.getLogger(__name__)


class ClaimsResolver:

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    def claim_ids(self, raw_payload: Mapping[str, Any]) -> Dict[str, CID]:
        """Validate and parse the claim CIDs without fetching anything."""
        missing = [name for name in CLAIM_FIELDS if name not in raw_payload]
        if missing:
            raise MissingClaimError(missing)
        return {name: parse_cid(raw_payload[name], field=name) for name in CLAIM_FIELDS}

    async def resolve_claims(self, raw_payload: Mapping[str, Any]) -> Payload:
        cids = self.claim_ids(raw_payload)

        tasks = {
            name: asyncio.ensure_future(self._resolve_claim(name, cid))
            for name, cid in cids.items()
        }
        try:
            done, _ = await asyncio.wait(
                tasks.values(), return_when=asyncio.FIRST_EXCEPTION
            )
        finally:
            # Reached on first failure and on cancellation of the caller
            pending = [task for task in tasks.values() if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        # Several claims may have failed by the time wait() returns.
        # Report the first in claim order so the error is deterministic.
        errors = [
            (name, tasks[name].exception())
            for name in CLAIM_FIELDS
            if tasks[name] in done and not tasks[name].cancelled()
        ]
        for name, error in errors:
            if error is not None:
                logger.debug("Claim %s failed: %s", name, error)
                raise error

        return Payload(**{name: tasks[name].result() for name in CLAIM_FIELDS})

    async def _resolve_claim(self, name: str, cid: CID) -> Any:
        raw = await self.fetcher.fetch(cid)
        try:
            return json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise ClaimFormatError(name, str(cid), f"not UTF-8: {exc}") from exc
        except ValueError as exc:
            raise ClaimFormatError(name, str(cid), str(exc)) from exc
