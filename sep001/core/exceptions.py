"""
sep001 Exception Hierarchy

All exceptions inherit from DecodeError for easy catching.
Every one of them is fatal to the decode call that raised it.
"""

from typing import Any, Dict, Optional, Sequence


class DecodeError(Exception):
    """Base exception for all sep001 errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# ── Storage ───────────────────────────────────────────────────

class NotFoundError(DecodeError):
    """Raised when the storage network cannot resolve a CID"""

    def __init__(self, message: str, cid: Optional[str] = None):
        super().__init__(message, {"cid": cid} if cid else None)
        self.cid = cid


class StorageError(DecodeError):
    """Raised on transport or node failure unrelated to content existence"""

    def __init__(self, message: str, cid: Optional[str] = None):
        super().__init__(message, {"cid": cid} if cid else None)
        self.cid = cid


# ── Token ─────────────────────────────────────────────────────

class SignatureVerificationError(DecodeError):
    """Raised when the token is malformed or its embedded-key signature fails"""

    def __init__(self, reason: str):
        super().__init__(f"Signature verification failed: {reason}")
        self.reason = reason


class PayloadFormatError(DecodeError):
    """Raised when a verified payload is not a UTF-8 JSON object"""
    pass


# ── Claims ────────────────────────────────────────────────────

class MissingClaimError(DecodeError):
    """Raised when one or more of the s, d, t claims is absent"""

    def __init__(self, fields: Sequence[str]):
        self.fields = tuple(fields)
        super().__init__(
            "Invalid standard payload. Missing claim(s): "
            + ", ".join(self.fields),
            {"fields": ",".join(self.fields)},
        )


class InvalidClaimIdError(DecodeError):
    """Raised when a claim value is not a parseable content identifier"""

    def __init__(self, field: str, value: Any):
        super().__init__(
            f"Claim '{field}' is not a valid CID",
            {"field": field, "value": repr(value)},
        )
        self.field = field
        self.value = value


class ClaimFormatError(DecodeError):
    """Raised when a dereferenced claim document is not UTF-8 JSON"""

    def __init__(self, field: str, cid: str, reason: str):
        super().__init__(
            f"Claim '{field}' is not valid JSON: {reason}",
            {"field": field, "cid": cid},
        )
        self.field = field
        self.cid = cid
