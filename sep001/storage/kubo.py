"""
sep001/storage/kubo.py

Block source backed by a Kubo (go-ipfs) node's RPC API.

    POST {api_url}/api/v0/block/get?arg=<cid>

Kubo answers errors with a non-2xx status and a JSON body:
    {"Message": "...", "Code": 0, "Type": "error"}
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import httpx
from multiformats import CID

from sep001.core.exceptions import NotFoundError, StorageError
from sep001.storage.base import BlockStore

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:5001"

# Substrings of Kubo's JSON "Message" when a block cannot be resolved
_NOT_FOUND_MARKERS = ("not found", "could not find", "no link named")


class KuboBlockStore(BlockStore):
    """Kubo RPC client. Owns its httpx client unless one is passed in."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def get(self, cid: CID) -> bytes:
        key = str(cid)
        url = f"{self.api_url}/api/v0/block/get"
        try:
            resp = await self._client.post(url, params={"arg": key})
        except httpx.TimeoutException as exc:
            raise StorageError(f"Timed out fetching block: {exc}", cid=key) from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"Kubo request failed: {exc}", cid=key) from exc

        if resp.status_code == 200:
            return resp.content

        message, from_kubo = self._error_message(resp)
        logger.debug("Kubo block/get %s -> %d %s", key, resp.status_code, message)
        if from_kubo and any(marker in message.lower() for marker in _NOT_FOUND_MARKERS):
            raise NotFoundError(f"Block not found: {message}", cid=key)
        raise StorageError(
            f"Kubo returned HTTP {resp.status_code}: {message}", cid=key
        )

    @staticmethod
    def _error_message(resp: httpx.Response) -> Tuple[str, bool]:
        """(message, True if it came from a Kubo JSON error body)."""
        try:
            body = resp.json()
        except ValueError:
            return resp.text.strip() or resp.reason_phrase, False
        if isinstance(body, dict) and isinstance(body.get("Message"), str):
            return body["Message"], True
        return resp.text.strip(), False

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
