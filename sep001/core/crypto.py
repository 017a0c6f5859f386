"""
sep001/core/crypto.py

Embedded-key policy.

Key contracts:
    ALGORITHMS                      : JOSE name → key shape the algorithm requires
    load_embedded_key(jwk, alg)     : public JWK → cryptography public key,
                                      ValueError if unusable

JWK import and the signature primitives belong to PyJWT. This module only
decides which embedded keys are acceptable. Nothing here consults a key
store or a trust root: a valid signature only proves the payload was
signed by the key the token claims.

CRITICAL:
    load_embedded_key() refuses private or symmetric keys. A JWK carrying
    "d" (or any other private member) is rejected even if its public half
    is well formed.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Mapping, Union

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.ed448 import Ed448PublicKey
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from jwt import PyJWK
from jwt.exceptions import PyJWTError

PublicKey = Union[
    Ed25519PublicKey,
    Ed448PublicKey,
    ec.EllipticCurvePublicKey,
    rsa.RSAPublicKey,
]


@dataclass(frozen=True)
class KeyShape:
    """kty and curves a JOSE algorithm accepts. Empty curves: no crv member."""
    kty:    str
    curves: FrozenSet[str] = frozenset()


ALGORITHMS: Dict[str, KeyShape] = {
    "EdDSA":  KeyShape("OKP", frozenset({"Ed25519", "Ed448"})),
    "ES256":  KeyShape("EC",  frozenset({"P-256"})),
    "ES384":  KeyShape("EC",  frozenset({"P-384"})),
    "ES512":  KeyShape("EC",  frozenset({"P-521"})),
    "ES256K": KeyShape("EC",  frozenset({"secp256k1"})),
    "RS256":  KeyShape("RSA"),
    "RS384":  KeyShape("RSA"),
    "RS512":  KeyShape("RSA"),
    "PS256":  KeyShape("RSA"),
    "PS384":  KeyShape("RSA"),
    "PS512":  KeyShape("RSA"),
}

_PRIVATE_MEMBERS = frozenset({"d", "p", "q", "dp", "dq", "qi", "oth", "k"})

MIN_RSA_KEY_BITS = 2048


def load_embedded_key(jwk: Mapping[str, Any], alg: str) -> PublicKey:
    """
    Build a verifying key from a public JWK for the given algorithm.

    Raises ValueError if:
        alg is unknown
        jwk is not an object, is private, or is symmetric
        kty or curve do not match what alg requires
        key material is malformed (off-curve point, short RSA modulus)
    """
    shape = ALGORITHMS.get(alg)
    if shape is None:
        raise ValueError(f"unsupported algorithm {alg!r}")
    if not isinstance(jwk, Mapping):
        raise ValueError("jwk must be a JSON object")

    kty = jwk.get("kty")
    if kty == "oct":
        raise ValueError("symmetric jwk cannot be used as an embedded key")
    private = _PRIVATE_MEMBERS.intersection(jwk.keys())
    if private:
        raise ValueError(
            "jwk must be a public key, found private member(s): "
            + ", ".join(sorted(private))
        )
    if kty != shape.kty:
        raise ValueError(f"algorithm {alg} requires kty {shape.kty!r}, got {kty!r}")
    crv = jwk.get("crv")
    if shape.curves and crv not in shape.curves:
        raise ValueError(
            f"algorithm {alg} requires curve {' or '.join(sorted(shape.curves))}, "
            f"got {crv!r}"
        )

    try:
        public_key = PyJWK(dict(jwk), algorithm=alg).key
    except (PyJWTError, ValueError, TypeError, KeyError) as exc:
        raise ValueError(f"malformed {kty} key: {exc}") from exc

    if isinstance(public_key, rsa.RSAPublicKey) and public_key.key_size < MIN_RSA_KEY_BITS:
        raise ValueError(
            f"RSA modulus must be at least {MIN_RSA_KEY_BITS} bits, "
            f"got {public_key.key_size}"
        )
    return public_key
