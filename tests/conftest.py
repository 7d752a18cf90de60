"""
Pytest configuration and shared fixtures for codec tests.

Provides:
- Sample principals and expression trees
- Wire rule builders for hand-crafted (possibly malformed) rule trees
- AnyIO backend selection
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Add project root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402 (import after path setup)

from endorsement_policy.codec.wire import EndorsementRule  # noqa: E402
from endorsement_policy.domain.enums import Role, WireRole  # noqa: E402
from endorsement_policy.domain.expression import And, AtLeast, Or, Principal  # noqa: E402


# =============================================================================
# AnyIO Backend Configuration
# =============================================================================
@pytest.fixture
def anyio_backend():
    return "asyncio"


# =============================================================================
# Expression Fixtures
# =============================================================================


def org(n: int, role: Role = Role.PEER) -> Principal:
    """Principal ORG<n> holding `role`."""
    return Principal(f"ORG{n}", role)


@pytest.fixture
def p1() -> Principal:
    return org(1)


@pytest.fixture
def p2() -> Principal:
    return org(2)


@pytest.fixture
def p3() -> Principal:
    return org(3)


@pytest.fixture
def p4() -> Principal:
    return org(4)


@pytest.fixture
def two_of_three() -> AtLeast:
    """AtLeast 2 of ORG1, ORG2, ORG3."""
    return AtLeast([org(1), org(2), org(3)], 2)


@pytest.fixture
def nested_policy() -> And:
    """ORG1 and (ORG3 or ORG4)."""
    return And([org(1), Or([org(3), org(4)])])


# =============================================================================
# Wire Rule Builders
# =============================================================================


def wire_rule(
    min_endorsements: int = 0,
    principals: list[tuple[str, WireRole | int]] | None = None,
    rules: list | None = None,
):
    """
    Build an EndorsementRule by hand.

    Args:
        min_endorsements: Value of min_endorsements
        principals: (msp_id, role) pairs
        rules: Nested EndorsementRule messages
    """
    rule = EndorsementRule(min_endorsements=min_endorsements)
    for msp_id, role in principals or []:
        rule.principals.add(msp_id=msp_id, role=int(role))
    for sub_rule in rules or []:
        rule.rules.append(sub_rule)
    return rule


@pytest.fixture
def make_wire_rule():
    return wire_rule
