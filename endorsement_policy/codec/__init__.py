"""
Wire codec for endorsement policy expressions.

Key Components:
- wire: Protobuf messages for the flattened rule tree
- encoder: Expression -> EndorsementRule lowering
- decoder: EndorsementRule -> Expression, inferring each combinator
- equivalence: Order-insensitive expression equality
- validator: Well-formedness checks run before encoding
- canonicalizer: Deterministic JSON form and fingerprints

Design Principles:
- The wire format carries no operator tag; the decoder infers it
- Decoding a parsed message never fails
- Round trips are exact up to child order and And/Or canonicalization
"""

from endorsement_policy.codec.canonicalizer import (
    expression_from_json,
    policy_fingerprint,
    to_canonical_json_string,
)
from endorsement_policy.codec.decoder import decode, infer_combinator
from endorsement_policy.codec.encoder import encode, encode_into
from endorsement_policy.codec.equivalence import canonical_key, equivalent
from endorsement_policy.codec.validator import validate_expression

__all__ = [
    "canonical_key",
    "decode",
    "encode",
    "encode_into",
    "equivalent",
    "expression_from_json",
    "infer_combinator",
    "policy_fingerprint",
    "to_canonical_json_string",
    "validate_expression",
]
