"""
CLI: Encode sample endorsement policies, decode them back and print both.

Usage:
    uv run policy-roundtrip
    uv run policy-roundtrip --policy nested --json
    uv run policy-roundtrip --hex 0a0c120a0802...
"""

from __future__ import annotations

import argparse

from endorsement_policy import (
    And,
    AtLeast,
    DeserializationError,
    Or,
    Principal,
    Role,
    decode_policy,
    encode_policy,
)
from endorsement_policy.codec.canonicalizer import policy_fingerprint, to_canonical_json_pretty
from endorsement_policy.core.config import settings
from endorsement_policy.core.observability import configure_logging


def _org(n: int) -> Principal:
    return Principal(f"ORG{n}", Role.PEER)


SAMPLE_POLICIES = {
    "single": _org(1),
    "two-of-three": AtLeast([_org(1), _org(2), _org(3)], 2),
    "nested": And([_org(1), Or([_org(3), _org(4)])]),
    "all-of-two": And([_org(1), _org(2)]),
    "any-of-two": Or([_org(1), _org(2)]),
}


def _show(label: str, expr, as_json: bool) -> None:
    print(f"{label}:")
    print(to_canonical_json_pretty(expr) if as_json else f"  {expr!r}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Round-trip endorsement policies over the wire")
    parser.add_argument(
        "--policy",
        choices=sorted(SAMPLE_POLICIES),
        action="append",
        help="Sample policy to round-trip (repeatable, default: all)",
    )
    parser.add_argument("--hex", help="Decode a hex-encoded EndorsementPolicy instead")
    parser.add_argument("--json", action="store_true", help="Print canonical JSON")
    args = parser.parse_args()

    configure_logging(settings)

    if args.hex:
        try:
            expr = decode_policy(bytes.fromhex(args.hex))
        except (ValueError, DeserializationError) as e:
            print(f"Cannot decode policy: {e}")
            return 1
        _show("Decoded", expr, args.json)
        print(f"Fingerprint: {policy_fingerprint(expr)}")
        return 0

    exit_code = 0
    for name in args.policy or sorted(SAMPLE_POLICIES):
        original = SAMPLE_POLICIES[name]
        data = encode_policy(original)
        decoded = decode_policy(data)

        print(f"=== {name}")
        _show("Original", original, args.json)
        print(f"Wire ({len(data)} bytes): {data.hex()}")
        _show("Decoded", decoded, args.json)

        if decoded == original:
            print("Round trip: equivalent")
        else:
            print("Round trip: NOT equivalent")
            exit_code = 1

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
