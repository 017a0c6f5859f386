from sep001.decoder.claims import ClaimsResolver
from sep001.decoder.compact import CompactDecoder, create_compact
from sep001.decoder.fetcher import Fetcher
from sep001.decoder.verifier import Verifier

__all__ = [
    "ClaimsResolver",
    "CompactDecoder",
    "Fetcher",
    "Verifier",
    "create_compact",
]
