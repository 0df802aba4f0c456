#!/usr/bin/env python3

import json
import sys

from tripletex_gateway.services.signature import compute


def make_signature(secret: str, payload: str) -> str:
    """Generate an X-Tripletex-Signature value for testing."""
    return compute(payload.encode("utf-8"), secret)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print("Usage: python -m tripletex_gateway.sign <secret> <payload>")
        return 1

    secret, payload = args

    # Validate payload is valid JSON
    try:
        json.loads(payload)
    except json.JSONDecodeError:
        print("Error: Payload must be valid JSON", file=sys.stderr)
        return 1

    print(make_signature(secret, payload))
    return 0


if __name__ == "__main__":
    sys.exit(main())
