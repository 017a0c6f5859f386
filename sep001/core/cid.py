"""
sep001/core/cid.py

Content identifier helpers over the multiformats CID implementation.

Parsing a CID never fetches data. Both CIDv0 ("Qm...") and multibase
CIDv1 strings are accepted, as well as binary CIDs.
"""

from typing import Optional, Union

from multiformats import CID, multihash

from sep001.core.exceptions import InvalidClaimIdError

CIDLike = Union[CID, str, bytes]

# Codec and hash used when addressing raw blocks (ipfs block put defaults)
RAW_CODEC     = "raw"
HASH_FUNCTION = "sha2-256"


def parse_cid(value: CIDLike, field: Optional[str] = None) -> CID:
    """
    Parse a content identifier.

    With field set, the value came out of a claim and any failure is
    raised as InvalidClaimIdError naming that field. Without it, failures
    surface as ValueError for the caller's own top-level parse.
    """
    if isinstance(value, CID):
        return value
    if not isinstance(value, (str, bytes)) or not value:
        if field is not None:
            raise InvalidClaimIdError(field, value)
        raise ValueError(f"Not a content identifier: {value!r}")
    try:
        return CID.decode(value)
    except Exception as exc:
        if field is not None:
            raise InvalidClaimIdError(field, value) from exc
        raise ValueError(f"Not a content identifier: {value!r}: {exc}") from exc


def cid_for_bytes(data: bytes) -> CID:
    """CIDv1 (raw codec, sha2-256, base32) addressing the given block."""
    digest = multihash.digest(data, HASH_FUNCTION)
    return CID("base32", 1, RAW_CODEC, digest)
