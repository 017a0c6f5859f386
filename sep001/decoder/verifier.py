from __future__ import annotations

import json
from typing import Iterable, Optional, Union

from sep001.core.exceptions import PayloadFormatError
from sep001.core.jws import compact_verify
from sep001.core.models import VerifiedToken


class Verifier:
    """
    Embedded-key verification of the root token.

    The signature is checked first. Only a verified payload is decoded
    as UTF-8 JSON.
    """

    def __init__(self, algorithms: Optional[Iterable[str]] = None) -> None:
        self.algorithms = tuple(algorithms) if algorithms is not None else None

    def verify(self, raw_token: Union[bytes, str]) -> VerifiedToken:
        header, payload_bytes = compact_verify(raw_token, algorithms=self.algorithms)

        try:
            payload = json.loads(payload_bytes.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise PayloadFormatError(f"Payload is not UTF-8: {exc}") from exc
        except ValueError as exc:
            raise PayloadFormatError(f"Payload is not JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise PayloadFormatError(
                f"Payload must be a JSON object, got {type(payload).__name__}"
            )
        return VerifiedToken(header=header, payload=payload)
