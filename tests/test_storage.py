"""
tests/test_storage.py

Block stores: in-memory store bookkeeping and the Kubo RPC client's
error mapping (driven through httpx.MockTransport, no node required).
"""

import asyncio

import httpx
import pytest

from helpers.token_factory import publish_envelope
from sep001 import create_compact
from sep001.core.cid import cid_for_bytes, parse_cid
from sep001.core.exceptions import NotFoundError, StorageError
from sep001.decoder.fetcher import Fetcher
from sep001.storage.kubo import KuboBlockStore
from sep001.storage.memory import MemoryBlockStore


def _kubo(handler) -> KuboBlockStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return KuboBlockStore(api_url="http://ipfs.test:5001/", client=client)


def _kubo_error(message: str, status: int = 500) -> httpx.Response:
    return httpx.Response(status, json={"Message": message, "Code": 0, "Type": "error"})


class TestMemoryBlockStore:

    def test_put_returns_content_address(self, store):
        cid = store.put(b"hello")
        assert cid == cid_for_bytes(b"hello")
        assert str(cid).startswith("bafkrei")
        assert cid in store
        assert len(store) == 1

    def test_get_and_count(self, store):
        cid = store.put(b"hello")
        assert asyncio.run(store.get(cid)) == b"hello"
        assert store.count(cid) == 1
        assert store.total_requests == 1

    def test_missing_block(self, store):
        cid = cid_for_bytes(b"never stored")
        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(store.get(cid))
        assert exc_info.value.cid == str(cid)
        assert store.count(cid) == 1

    def test_remove(self, store):
        cid = store.put(b"hello")
        store.remove(cid)
        assert cid not in store

    def test_context_manager(self):
        async def run():
            async with MemoryBlockStore() as s:
                cid = s.put(b"x")
                return await s.get(cid)

        assert asyncio.run(run()) == b"x"


class TestFetcher:

    def test_accepts_string_cid(self, store):
        cid = store.put(b"data")
        assert asyncio.run(Fetcher(store).fetch(str(cid))) == b"data"

    def test_rejects_garbage_root(self, store):
        with pytest.raises(ValueError):
            asyncio.run(Fetcher(store).fetch("definitely not a cid"))
        assert store.total_requests == 0


class TestKuboBlockStore:

    def test_block_get_request(self):
        cid = cid_for_bytes(b"block")
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["arg"] = request.url.params["arg"]
            return httpx.Response(200, content=b"block")

        assert asyncio.run(_kubo(handler).get(cid)) == b"block"
        assert seen == {"method": "POST", "path": "/api/v0/block/get", "arg": str(cid)}

    @pytest.mark.parametrize("message", [
        "block was not found locally (offline)",
        "ipld: could not find bafkreiabc",
    ])
    def test_not_found(self, message):
        store = _kubo(lambda request: _kubo_error(message))
        cid = cid_for_bytes(b"x")
        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(store.get(cid))
        assert exc_info.value.cid == str(cid)

    def test_node_error(self):
        store = _kubo(lambda request: _kubo_error("failed to get block: repo closed"))
        with pytest.raises(StorageError, match="HTTP 500"):
            asyncio.run(store.get(cid_for_bytes(b"x")))

    def test_non_json_error_body(self):
        store = _kubo(lambda request: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(StorageError, match="Bad Gateway"):
            asyncio.run(store.get(cid_for_bytes(b"x")))

    def test_plain_404_is_a_storage_error(self):
        # A wrong api_url reaches some other HTTP server, not Kubo
        store = _kubo(lambda request: httpx.Response(404, text="404 page not found"))
        with pytest.raises(StorageError, match="HTTP 404") as exc_info:
            asyncio.run(store.get(cid_for_bytes(b"x")))
        assert not isinstance(exc_info.value, NotFoundError)

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(StorageError, match="connection refused"):
            asyncio.run(_kubo(handler).get(cid_for_bytes(b"x")))

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(StorageError, match="Timed out"):
            asyncio.run(_kubo(handler).get(cid_for_bytes(b"x")))

    def test_injected_client_left_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        store = KuboBlockStore(client=client)
        asyncio.run(store.close())
        assert not client.is_closed

    def test_owned_client_closed(self):
        store = KuboBlockStore()
        asyncio.run(store.close())
        assert store._client.is_closed

    def test_end_to_end_decode(self, signer):
        blocks = MemoryBlockStore()
        root, _ = publish_envelope(blocks, signer, {"title": "A"}, {"desc": "B"}, {"type": "C"})

        def handler(request: httpx.Request) -> httpx.Response:
            cid = parse_cid(request.url.params["arg"])
            if cid not in blocks:
                return _kubo_error("block not found")
            return httpx.Response(200, content=blocks._blocks[str(cid)])

        envelope = asyncio.run(create_compact(_kubo(handler)).decode(root))
        assert envelope.to_dict()["payload"] == {
            "s": {"title": "A"}, "d": {"desc": "B"}, "t": {"type": "C"},
        }
