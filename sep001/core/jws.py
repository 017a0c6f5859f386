"""
sep001/core/jws.py

JWS compact verification with an embedded JWK (RFC 7515).

    compact_verify(token) → (protected_header, payload_bytes)

PyJWT parses the compact serialization and checks the signature. The
key it checks against is the one the token embeds as "jwk", admitted by
load_embedded_key().

Fail-closed: every structural or cryptographic anomaly raises
SignatureVerificationError before a single payload byte is returned.
The payload is returned as bytes. Interpreting it is the caller's job
and happens only after this function returns.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import jwt
from jwt.api_jws import PyJWS
from jwt.exceptions import InvalidSignatureError, PyJWTError

from sep001.core.crypto import ALGORITHMS, load_embedded_key
from sep001.core.exceptions import SignatureVerificationError

logger = logging.getLogger(__name__)

_jws = PyJWS()


def _as_bytes(token: Union[bytes, str]) -> bytes:
    if isinstance(token, str):
        if not token.isascii():
            raise SignatureVerificationError("token is not ASCII text")
        data = token.encode("ascii")
    elif isinstance(token, (bytes, bytearray, memoryview)):
        data = bytes(token)
        if not data.isascii():
            raise SignatureVerificationError("token is not ASCII text")
    else:
        raise SignatureVerificationError(
            f"token must be bytes or str, got {type(token).__name__}"
        )
    # Blocks written with `echo ... | ipfs block put` end in a newline
    return data.rstrip()


def _embedded_key(header: Dict[str, Any], algorithms: Optional[Iterable[str]]):
    alg = header.get("alg")
    if not isinstance(alg, str) or not alg:
        raise SignatureVerificationError('"alg" header parameter is missing or invalid')
    if alg not in ALGORITHMS:
        raise SignatureVerificationError(f'"alg" value {alg!r} is not supported')
    if algorithms is not None and alg not in set(algorithms):
        raise SignatureVerificationError(f'"alg" value {alg!r} is not allowed')

    # No JWS extension is implemented
    if "crit" in header:
        raise SignatureVerificationError('critical extensions ("crit") are not supported')
    if header.get("b64", True) is not True:
        raise SignatureVerificationError('unencoded payloads ("b64": false) are not supported')

    jwk = header.get("jwk")
    if not isinstance(jwk, dict):
        raise SignatureVerificationError('"jwk" header parameter must be a JSON object')
    try:
        return alg, load_embedded_key(jwk, alg)
    except ValueError as exc:
        raise SignatureVerificationError(f'invalid "jwk": {exc}') from exc


def compact_verify(
    token: Union[bytes, str],
    algorithms: Optional[Iterable[str]] = None,
) -> Tuple[Dict[str, Any], bytes]:
    """
    Verify a compact JWS whose signing key is embedded as "jwk".

    Args:
        token:      compact serialization, as fetched. Trailing whitespace
                    is ignored.
        algorithms: optional allowlist of JOSE algorithm names.

    Returns:
        (protected_header, payload_bytes)

    Raises:
        SignatureVerificationError for anything short of a valid signature.
    """
    data = _as_bytes(token)
    segments = data.count(b".") + 1
    if segments != 3:
        raise SignatureVerificationError(
            f"compact token must have 3 segments, got {segments}"
        )

    try:
        header = jwt.get_unverified_header(data)
    except PyJWTError as exc:
        raise SignatureVerificationError(f"token is malformed: {exc}") from exc
    if not header:
        raise SignatureVerificationError("protected header must be a non-empty JSON object")

    alg, key = _embedded_key(header, algorithms)

    try:
        decoded = _jws.decode_complete(data, key=key, algorithms=[alg])
    except InvalidSignatureError as exc:
        raise SignatureVerificationError("signature does not match the embedded key") from exc
    except PyJWTError as exc:
        raise SignatureVerificationError(f"token is malformed: {exc}") from exc

    logger.debug("Verified compact token alg=%s kty=%s", alg, header["jwk"].get("kty"))
    return decoded["header"], decoded["payload"]
