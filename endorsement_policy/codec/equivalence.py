"""
Order-insensitive structural equivalence for expression trees.

Two expressions are equivalent when they are the same variant, their child
multisets match regardless of order, AtLeast thresholds match, and principals
carry the same identity and role.
"""

from collections import Counter

from endorsement_policy.domain.expression import AtLeast, PolicyNode, Principal


def canonical_key(expr: PolicyNode) -> tuple:
    """
    Build a hashable, order-normalised key for an expression.

    Children keys are sorted at every level, so two trees that differ only
    in child order produce the same key.
    """
    if isinstance(expr, Principal):
        return (expr.kind, expr.msp_id, expr.role.value)

    children = tuple(sorted(canonical_key(child) for child in expr.children))
    if isinstance(expr, AtLeast):
        return (expr.kind, expr.threshold, children)
    return (expr.kind, children)


def equivalent(left: PolicyNode, right: PolicyNode) -> bool:
    """Compare two expressions ignoring child order."""
    if type(left) is not type(right):
        return False

    if isinstance(left, Principal):
        return left.msp_id == right.msp_id and left.role == right.role

    if isinstance(left, AtLeast) and left.threshold != right.threshold:
        return False

    if len(left.children) != len(right.children):
        return False

    # Multiset comparison: each distinct child must occur equally often
    return Counter(map(canonical_key, left.children)) == Counter(
        map(canonical_key, right.children)
    )
