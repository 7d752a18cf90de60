"""
Wire rule tree -> Expression reconstruction.

A wire rule carries no operator tag, so the combinator is inferred from the
number of direct entries and `min_endorsements`, in this priority order:

1. exactly one principal and no nested rules -> that Principal
2. min == 1                                 -> Or
3. min == number of entries                 -> And
4. min == 0                                 -> the first entry
5. anything else                            -> AtLeast(entries, min)

Rules 2 and 3 make the wire format lossy: AtLeast(xs, 1) comes back as Or(xs)
and AtLeast(xs, len(xs)) comes back as And(xs).

Rule 4 is what unwraps the zero-threshold accumulator that `encode` places at
the top of every policy.

Entries are ordered nested rules first, then principals, whatever order the
encoder saw them in.

Decoding never raises on a parsed EndorsementRule.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field

from endorsement_policy.core.config import settings
from endorsement_policy.domain.enums import Role, WireRole
from endorsement_policy.domain.expression import And, AtLeast, Or, Principal

logger = logging.getLogger(__name__)

# Roles folded into PEER by older decoders
_LEGACY_COLLAPSED_ROLES = (Role.ADMIN, Role.CLIENT)


@dataclass
class _DecodeContext:
    legacy_role_collapse: bool
    warn_on_ambiguity: bool
    ambiguous: Counter = field(default_factory=Counter)


def decode(
    rule,
    *,
    legacy_role_collapse: bool | None = None,
    warn_on_ambiguity: bool | None = None,
):
    """
    Reconstruct an expression from a wire rule.

    Args:
        rule: EndorsementRule message
        legacy_role_collapse: Map ADMIN and CLIENT principals to PEER, as older
            decoders did. Defaults to CODEC_LEGACY_ROLE_COLLAPSE.
        warn_on_ambiguity: Log a warning for every node resolved to And/Or
            that could also have been an explicit AtLeast. Defaults to
            CODEC_WARN_ON_AMBIGUITY.

    Returns:
        Expression
    """
    ctx = _DecodeContext(
        legacy_role_collapse=(
            settings.codec_legacy_role_collapse
            if legacy_role_collapse is None
            else legacy_role_collapse
        ),
        warn_on_ambiguity=(
            settings.codec_warn_on_ambiguity if warn_on_ambiguity is None else warn_on_ambiguity
        ),
    )
    expr = _decode_rule(rule, ctx, path="$")
    _record_ambiguity_metrics(ctx.ambiguous)
    return expr


def infer_combinator(decoded_rules: list, decoded_principals: list, min_endorsements: int):
    """
    Decide which expression a wire node stands for.

    This is the single place where the And/Or/AtLeast ambiguity of the wire
    format is resolved.

    Args:
        decoded_rules: Expressions decoded from the node's nested rules
        decoded_principals: Principals decoded from the node's principals
        min_endorsements: The node's minimum endorsement count

    Returns:
        Expression
    """
    if len(decoded_principals) == 1 and not decoded_rules:
        return decoded_principals[0]

    combined = [*decoded_rules, *decoded_principals]
    total = len(combined)

    if min_endorsements == 1:
        return Or(combined)
    if min_endorsements == total:
        return And(combined)
    if min_endorsements == 0:
        return _collapse_zero_threshold(combined)
    return AtLeast(combined, min_endorsements)


def _collapse_zero_threshold(combined: list):
    """
    Resolve a zero-threshold node with at least one entry to its first entry.

    Every policy's top rule is such a node. Anything after the first entry is
    discarded.
    """
    if len(combined) > 1:
        logger.debug("Zero-threshold rule discards %d trailing entries", len(combined) - 1)
    return combined[0]


def _decode_rule(rule, ctx: _DecodeContext, path: str):
    decoded_rules = [
        _decode_rule(sub_rule, ctx, f"{path}.rules[{i}]") for i, sub_rule in enumerate(rule.rules)
    ]
    decoded_principals = [
        Principal(p.msp_id, _decode_role(p.role, ctx.legacy_role_collapse)) for p in rule.principals
    ]

    expr = infer_combinator(decoded_rules, decoded_principals, rule.min_endorsements)

    # Judged on the raw node: a zero-threshold node returns a child's result
    total = len(decoded_rules) + len(decoded_principals)
    if total > 1 and rule.min_endorsements in (1, total):
        resolution = "OR" if rule.min_endorsements == 1 else "AND"
        ctx.ambiguous[resolution] += 1
        if ctx.warn_on_ambiguity:
            logger.warning(
                "Rule at %s resolved to %s; an explicit AtLeast(%d of %d) encodes identically",
                path,
                resolution,
                rule.min_endorsements,
                total,
                extra={"path": path, "resolution": resolution},
            )

    return expr


def _decode_role(value: int, legacy_role_collapse: bool) -> Role:
    """Map a wire role number to a Role."""
    try:
        wire_role = WireRole(value)
    except ValueError:
        logger.warning("Unknown principal role %d on the wire, decoding as MEMBER", value)
        return Role.MEMBER

    role = Role(wire_role.name)
    if legacy_role_collapse and role in _LEGACY_COLLAPSED_ROLES:
        return Role.PEER
    return role


def _record_ambiguity_metrics(ambiguous: Counter) -> None:
    """Record ambiguity counts; metric failures never break decoding."""
    if not ambiguous or not settings.metrics_enabled:
        return
    try:
        from endorsement_policy.core.observability import metrics

        for resolution, count in ambiguous.items():
            metrics.codec_ambiguous_nodes_total.labels(resolution=resolution).inc(count)
    except Exception:
        logger.debug("Failed to record ambiguity metrics", exc_info=True)
