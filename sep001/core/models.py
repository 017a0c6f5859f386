"""
sep001/core/models.py

SEP-001 Compact Data Model

═══════════════════════════════════════════════════════════════════
FORMAT CONTRACTS
═══════════════════════════════════════════════════════════════════

CONTRACT 1: Envelope
    root block = JWS compact serialization, embedded-key signed
    protected header carries "alg" and a public "jwk"

CONTRACT 2: Claims
    verified payload is a JSON object carrying "s", "d", "t"
    each claim value is a CID string pointing to a JSON document

CONTRACT 3: Result
    DecodedEnvelope exists only after signature verification AND
    all three claims resolved. Never partial.

See: https://github.com/SynapseMedia/sep/blob/main/SEP/SEP-001.md
═══════════════════════════════════════════════════════════════════
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

# Claim order is fixed: validation, error reporting and output follow it
CLAIM_FIELDS: Tuple[str, ...] = ("s", "d", "t")

Header = Dict[str, Any]
RawPayload = Dict[str, Any]


@dataclass(frozen=True)
class VerifiedToken:
    """
    Output of the Verifier.

    header : the protected header exactly as signed
    payload: the decoded JSON payload object, not yet dereferenced
    """
    header:  Header
    payload: RawPayload


@dataclass(frozen=True)
class Payload:
    """The three resolved claim documents."""
    s: Any
    d: Any
    t: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"s": self.s, "d": self.d, "t": self.t}


@dataclass(frozen=True)
class DecodedEnvelope:
    """Fully decoded and verified SEP-001 artifact."""
    header:  Header
    payload: Payload

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header":  dict(self.header),
            "payload": self.payload.to_dict(),
        }
