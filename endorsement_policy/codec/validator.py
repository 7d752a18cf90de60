"""
Expression Tree Validation for Endorsement Policies.

Validates that an expression tree is well-formed before it is encoded:
- Combinators have at least one child
- AtLeast thresholds lie in [0, len(children)]
- Principals name a non-empty MSP identity
- The tree stays within the configured depth and node count

The decoder accepts trees that fail these checks; validation only guards the
encode side.
"""

from endorsement_policy.core.config import settings
from endorsement_policy.core.errors import ValidationError
from endorsement_policy.domain.expression import AtLeast, Combinator, PolicyNode, Principal


def validate_expression(
    expr,
    max_depth: int | None = None,
    max_nodes: int | None = None,
) -> None:
    """
    Validate an expression tree.

    Args:
        expr: Root of the expression tree
        max_depth: Maximum nesting depth (defaults to CODEC_MAX_DEPTH)
        max_nodes: Maximum number of nodes, leaves included (defaults to
                   CODEC_MAX_NODES)

    Raises:
        ValidationError: If any check fails, with the offending node's path
                         in `details["path"]`

    Example:
        >>> validate_expression(AtLeast([Principal("ORG1", Role.PEER)], 1))  # Passes
        >>> validate_expression(AtLeast([Principal("ORG1", Role.PEER)], 2))
        Traceback (most recent call last):
        ...
        ValidationError: AtLeast threshold 2 is outside [0, 1] at $
    """
    max_depth = settings.codec_max_depth if max_depth is None else max_depth
    max_nodes = settings.codec_max_nodes if max_nodes is None else max_nodes

    node_count = _validate_node(expr, path="$", depth=0, max_depth=max_depth)

    if node_count > max_nodes:
        raise ValidationError(
            f"Expression exceeds maximum node count of {max_nodes} (got {node_count} nodes)",
            details={"node_count": node_count, "max_nodes": max_nodes},
        )


def _validate_node(expr, path: str, depth: int, max_depth: int) -> int:
    """
    Recursively validate a node.

    Returns:
        Number of nodes in the subtree rooted at `expr`
    """
    if depth > max_depth:
        raise ValidationError(
            f"Expression exceeds maximum depth of {max_depth} at {path}",
            details={"path": path, "max_depth": max_depth},
        )

    if not isinstance(expr, PolicyNode):
        raise ValidationError(
            f"Expression node must be an And, Or, AtLeast or Principal at {path}",
            details={"path": path, "type": type(expr).__name__},
        )

    if isinstance(expr, Principal):
        _validate_principal(expr, path)
        return 1

    if not isinstance(expr, Combinator):
        raise ValidationError(
            f"Unsupported expression node {type(expr).__name__} at {path}",
            details={"path": path, "type": type(expr).__name__},
        )

    if not expr.children:
        raise ValidationError(
            f"{expr.kind} must have at least one child at {path}",
            details={"path": path, "kind": expr.kind},
        )

    if isinstance(expr, AtLeast) and not 0 <= expr.threshold <= len(expr.children):
        raise ValidationError(
            f"AtLeast threshold {expr.threshold} is outside [0, {len(expr.children)}] at {path}",
            details={
                "path": path,
                "threshold": expr.threshold,
                "children_count": len(expr.children),
            },
        )

    count = 1
    for i, child in enumerate(expr.children):
        count += _validate_node(child, f"{path}.children[{i}]", depth + 1, max_depth)
    return count


def _validate_principal(expr: Principal, path: str) -> None:
    if not expr.msp_id or not expr.msp_id.strip():
        raise ValidationError(
            f"Principal must name an MSP identity at {path}",
            details={"path": path, "msp_id": expr.msp_id},
        )
