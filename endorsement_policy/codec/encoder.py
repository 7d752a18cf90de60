"""
Expression -> wire rule tree lowering.

Each combinator becomes a new EndorsementRule appended to its parent's
`rules`; each principal becomes an entry in its parent's `principals`. The
combinator is recorded only through `min_endorsements`:

- And: number of direct entries (principals + rules)
- Or: 1
- AtLeast: the threshold
"""

from endorsement_policy.codec.wire import EndorsementRule
from endorsement_policy.core.errors import EncodingError
from endorsement_policy.domain.enums import WireRole
from endorsement_policy.domain.expression import And, AtLeast, Combinator, Or, Principal


def encode(expr) -> EndorsementRule:
    """
    Encode an expression into the policy's top-level rule.

    The returned rule is an accumulator with min_endorsements 0 whose single
    entry is the encoded root: a nested rule for a combinator, or a principal
    for a bare principal.

    Raises:
        EncodingError: If a node cannot be represented on the wire
    """
    top = EndorsementRule()
    encode_into(expr, top)
    return top


def encode_into(expr, parent: EndorsementRule) -> None:
    """
    Encode `expr` into the caller-supplied parent rule.

    Only `parent` is mutated: a principal is appended to its principals, a
    combinator is built as a new rule and appended to its rules.
    """
    if isinstance(expr, Principal):
        parent.principals.add(msp_id=expr.msp_id, role=WireRole[expr.role.value].value)
        return

    if not isinstance(expr, Combinator):
        raise EncodingError(
            f"Cannot encode {type(expr).__name__} as an endorsement rule",
            details={"type": type(expr).__name__},
        )

    node = EndorsementRule()
    for child in expr.children:
        encode_into(child, node)

    if isinstance(expr, And):
        # All direct entries, counted after the children are in place
        min_endorsements = len(node.principals) + len(node.rules)
    elif isinstance(expr, Or):
        min_endorsements = 1
    elif isinstance(expr, AtLeast):
        min_endorsements = expr.threshold
    else:
        raise EncodingError(
            f"Unknown combinator {type(expr).__name__}",
            details={"type": type(expr).__name__},
        )

    try:
        node.min_endorsements = min_endorsements
    except (ValueError, TypeError) as e:
        raise EncodingError(
            "min_endorsements does not fit the wire field",
            details={"min_endorsements": min_endorsements, "error": str(e)},
        ) from e

    parent.rules.append(node)
