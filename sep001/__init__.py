"""
sep001/__init__.py

sep001: SEP-001 Compact envelope decoder

Resolves a root CID to an embedded-key signed JWS, verifies it, and
dereferences its s, d, t claims into one DecodedEnvelope.

    from sep001 import create_compact, KuboBlockStore

    async with KuboBlockStore("http://127.0.0.1:5001") as store:
        envelope = await create_compact(store).decode("bafkrei...")
"""

__version__ = "0.1.0"

from sep001.core.cid import cid_for_bytes, parse_cid
from sep001.core.crypto import ALGORITHMS, load_embedded_key
from sep001.core.exceptions import (
    ClaimFormatError,
    DecodeError,
    InvalidClaimIdError,
    MissingClaimError,
    NotFoundError,
    PayloadFormatError,
    SignatureVerificationError,
    StorageError,
)
from sep001.core.models import (
    CLAIM_FIELDS,
    DecodedEnvelope,
    Payload,
    VerifiedToken,
)
from sep001.decoder import (
    ClaimsResolver,
    CompactDecoder,
    Fetcher,
    Verifier,
    create_compact,
)
from sep001.storage import BlockStore, KuboBlockStore, MemoryBlockStore
from sep001.config import DecoderConfig

__all__ = [
    # Pipeline
    "CompactDecoder",
    "create_compact",
    "Fetcher",
    "Verifier",
    "ClaimsResolver",
    # Types
    "DecodedEnvelope",
    "Payload",
    "VerifiedToken",
    # Storage
    "BlockStore",
    "KuboBlockStore",
    "MemoryBlockStore",
    # Config
    "DecoderConfig",
    # Errors
    "DecodeError",
    "NotFoundError",
    "StorageError",
    "SignatureVerificationError",
    "PayloadFormatError",
    "MissingClaimError",
    "InvalidClaimIdError",
    "ClaimFormatError",
    # Helpers
    "parse_cid",
    "cid_for_bytes",
    "load_embedded_key",
    # Constants
    "ALGORITHMS",
    "CLAIM_FIELDS",
]
