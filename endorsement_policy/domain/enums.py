"""
Domain enums for endorsement policies.

`Role` is the in-memory role tag carried by a principal. `WireRole` holds the
numbering used by the EndorsementPrincipal.Role wire enum, which follows the
MSP role ordering (MEMBER, ADMIN, CLIENT, PEER).
"""

from enum import Enum, IntEnum


class Role(str, Enum):
    """Role a principal must hold to endorse."""

    MEMBER = "MEMBER"
    PEER = "PEER"
    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


class WireRole(IntEnum):
    """Numeric values of EndorsementPrincipal.Role on the wire."""

    MEMBER = 0
    ADMIN = 1
    CLIENT = 2
    PEER = 3

