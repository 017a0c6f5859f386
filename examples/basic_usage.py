"""
sep001: Basic Usage Example

Demonstrates:
- Connecting to a Kubo node
- Decoding a SEP-001 Compact envelope by root CID
- Telling "not authentic" apart from "not reachable"

Usage:
    python examples/basic_usage.py <root-cid> [api-url]
"""

import asyncio
import sys

from sep001 import (
    DecodeError,
    KuboBlockStore,
    NotFoundError,
    SignatureVerificationError,
    StorageError,
    create_compact,
)


async def decode(root_cid: str, api_url: str) -> int:
    async with KuboBlockStore(api_url) as store:
        decoder = create_compact(store)
        try:
            envelope = await decoder.decode(root_cid)
        except SignatureVerificationError as e:
            print(f"Envelope is not authentic: {e.reason}")
            return 1
        except (NotFoundError, StorageError) as e:
            print(f"Could not reach content: {e}")
            return 2
        except DecodeError as e:
            print(f"Envelope rejected: {e}")
            return 1
        except ValueError as e:
            print(f"Bad root CID: {e}")
            return 2

    print("=" * 60)
    print("SEP-001 envelope")
    print("=" * 60)
    print(f"  alg     : {envelope.header.get('alg')}")
    print(f"  key     : {envelope.header.get('jwk', {}).get('kty')}")
    print(f"  s       : {envelope.payload.s}")
    print(f"  d       : {envelope.payload.d}")
    print(f"  t       : {envelope.payload.t}")
    return 0


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    api_url = sys.argv[2] if len(sys.argv) > 2 else "http://127.0.0.1:5001"
    sys.exit(asyncio.run(decode(sys.argv[1], api_url)))


if __name__ == "__main__":
    main()
