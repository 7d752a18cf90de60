"""
Endorsement policy codec.

Converts endorsement policy expressions (And / Or / AtLeast over principals)
to and from the flattened EndorsementPolicy wire message.
"""

from endorsement_policy.core.errors import (
    DeserializationError,
    EncodingError,
    PolicyCodecError,
    ValidationError,
)
from endorsement_policy.domain.enums import Role
from endorsement_policy.domain.expression import And, AtLeast, Expression, Or, Principal
from endorsement_policy.policy import StateBasedEndorsement, decode_policy, encode_policy

__all__ = [
    "And",
    "AtLeast",
    "DeserializationError",
    "EncodingError",
    "Expression",
    "Or",
    "PolicyCodecError",
    "Principal",
    "Role",
    "StateBasedEndorsement",
    "ValidationError",
    "decode_policy",
    "encode_policy",
]
