"""
JSON Canonicalization for endorsement policy expressions.

Produces a deterministic JSON form of an expression: keys are sorted and the
children of every combinator are sorted by their own canonical form, so two
equivalent expressions serialize to byte-for-byte identical JSON.

This is used for:
- Fingerprinting policies (hash-based change detection)
- Human-readable dumps in logs and the round-trip demo
- Loading expressions from JSON documents
"""

import hashlib
import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from endorsement_policy.core.errors import ValidationError
from endorsement_policy.domain.expression import AtLeast, Principal, expression_adapter


def canonicalize_json(obj: Any) -> dict | list | Any:
    """
    Produce a representation of a JSON object with sorted keys at all levels.

    Note:
        This does NOT reorder lists. Children are ordered by
        `to_canonical_dict` before this is applied.
    """
    if isinstance(obj, dict):
        return {k: canonicalize_json(v) for k, v in sorted(obj.items())}

    elif isinstance(obj, list):
        return [canonicalize_json(item) for item in obj]

    else:
        return obj


def to_canonical_dict(expr) -> dict:
    """
    Convert an expression to a canonical dictionary.

    Example:
        >>> to_canonical_dict(Or([Principal("ORG2", Role.PEER), Principal("ORG1", Role.PEER)]))
        {'children': [{'kind': 'PRINCIPAL', 'msp_id': 'ORG1', 'role': 'PEER'},
                      {'kind': 'PRINCIPAL', 'msp_id': 'ORG2', 'role': 'PEER'}],
         'kind': 'OR'}
    """
    if isinstance(expr, Principal):
        return {"kind": expr.kind, "msp_id": expr.msp_id, "role": expr.role.value}

    children = [to_canonical_dict(child) for child in expr.children]
    children.sort(key=_sort_key)

    node: dict[str, Any] = {"kind": expr.kind, "children": children}
    if isinstance(expr, AtLeast):
        node["threshold"] = expr.threshold
    return canonicalize_json(node)


def to_canonical_json_string(expr) -> str:
    """
    Convert an expression to a compact canonical JSON string.

    Example:
        >>> to_canonical_json_string(Principal("ORG1", Role.PEER))
        '{"kind":"PRINCIPAL","msp_id":"ORG1","role":"PEER"}'
    """
    return json.dumps(
        to_canonical_dict(expr), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def to_canonical_json_pretty(expr) -> str:
    """Convert an expression to an indented canonical JSON string."""
    return json.dumps(to_canonical_dict(expr), sort_keys=True, indent=2, ensure_ascii=False)


def policy_fingerprint(expr) -> str:
    """
    Compute the SHA-256 fingerprint of an expression's canonical JSON.

    Equivalent expressions share a fingerprint.

    Returns:
        Fingerprint in format: sha256:<lowercase-hex>
    """
    data = to_canonical_json_string(expr).encode("utf-8")
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def expression_from_json(data: str | bytes | dict):
    """
    Load an expression from a JSON document or an already-parsed dictionary.

    Raises:
        ValidationError: If the document does not describe an expression
    """
    try:
        if isinstance(data, dict):
            return expression_adapter.validate_python(data)
        return expression_adapter.validate_json(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Document is not a valid endorsement policy expression",
            details={"errors": e.errors(include_url=False)},
        ) from e


def _sort_key(node: dict) -> str:
    return json.dumps(node, sort_keys=True, separators=(",", ":"))
