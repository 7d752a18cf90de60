"""
Public endorsement policy API.

`encode_policy` turns an expression into EndorsementPolicy bytes and
`decode_policy` turns such bytes back into an expression. The only failure
`decode_policy` reports is a DeserializationError for bytes that do not parse.

Example:
    >>> policy = AtLeast(
    ...     [Principal("ORG1", Role.PEER), Principal("ORG2", Role.PEER),
    ...      Principal("ORG3", Role.PEER)],
    ...     2,
    ... )
    >>> decode_policy(encode_policy(policy)) == policy
    True
"""

import logging
import time

from pydantic import BaseModel, ConfigDict

from endorsement_policy.codec.decoder import decode
from endorsement_policy.codec.encoder import encode
from endorsement_policy.codec.equivalence import equivalent
from endorsement_policy.codec.validator import validate_expression
from endorsement_policy.codec.wire import EndorsementPolicy, parse_policy, serialize_policy
from endorsement_policy.core.config import settings
from endorsement_policy.domain.expression import Expression

logger = logging.getLogger(__name__)


def encode_policy(root, *, validate: bool | None = None) -> bytes:
    """
    Encode an expression as serialized EndorsementPolicy bytes.

    Args:
        root: Root expression
        validate: Run `validate_expression` first (defaults to
                  CODEC_VALIDATE_ON_ENCODE)

    Returns:
        Serialized policy

    Raises:
        ValidationError: If validation is enabled and the tree is malformed
        EncodingError: If the tree cannot be represented on the wire
    """
    start_time = time.time()
    if validate is None:
        validate = settings.codec_validate_on_encode

    try:
        if validate:
            validate_expression(root)

        policy = EndorsementPolicy()
        policy.rule.CopyFrom(encode(root))
        data = serialize_policy(policy)

    except Exception:
        _record_codec_metrics("encode", "error", time.time() - start_time, 0)
        raise

    duration = time.time() - start_time
    logger.debug("Encoded endorsement policy: %d bytes, duration=%.6fs", len(data), duration)
    _record_codec_metrics("encode", "success", duration, len(data))
    return data


def decode_policy(
    data: bytes,
    *,
    legacy_role_collapse: bool | None = None,
    warn_on_ambiguity: bool | None = None,
):
    """
    Decode serialized EndorsementPolicy bytes into an expression.

    Args:
        data: Serialized policy
        legacy_role_collapse: See `decode`
        warn_on_ambiguity: See `decode`

    Returns:
        Expression

    Raises:
        DeserializationError: If the bytes are malformed, truncated, too
                              large, or not bytes at all
    """
    start_time = time.time()

    try:
        policy = parse_policy(data, max_bytes=settings.codec_max_payload_bytes)
    except Exception:
        _record_codec_metrics("decode", "error", time.time() - start_time, 0)
        raise

    expr = decode(
        policy.rule,
        legacy_role_collapse=legacy_role_collapse,
        warn_on_ambiguity=warn_on_ambiguity,
    )

    duration = time.time() - start_time
    logger.debug("Decoded endorsement policy: %d bytes, duration=%.6fs", len(data), duration)
    _record_codec_metrics("decode", "success", duration, len(data))
    return expr


def _record_codec_metrics(operation: str, status: str, duration: float, payload_bytes: int) -> None:
    """
    Record codec metrics to Prometheus.

    Metrics failures are ignored so they never break a codec call.

    Args:
        operation: "encode" or "decode"
        status: "success" or "error"
        duration: Operation duration in seconds
        payload_bytes: Size of the serialized policy
    """
    if not settings.metrics_enabled:
        return
    try:
        from endorsement_policy.core.observability import metrics

        metrics.codec_operations_total.labels(operation=operation, status=status).inc()
        metrics.codec_duration_seconds.labels(operation=operation).observe(duration)

        if status == "success":
            metrics.codec_payload_bytes.labels(operation=operation).observe(payload_bytes)
    except Exception:
        logger.debug("Failed to record codec metrics", exc_info=True)


class StateBasedEndorsement(BaseModel):
    """
    An endorsement policy attached to a piece of ledger state.

    Wraps the root expression and carries it to and from the wire.
    """

    model_config = ConfigDict(frozen=True)

    root: Expression

    @classmethod
    def build(cls, expr) -> "StateBasedEndorsement":
        return cls(root=expr)

    def to_bytes(self, *, validate: bool | None = None) -> bytes:
        return encode_policy(self.root, validate=validate)

    @classmethod
    def from_bytes(cls, data: bytes, **decode_options) -> "StateBasedEndorsement":
        return cls(root=decode_policy(data, **decode_options))

    def equivalent_to(self, other: "StateBasedEndorsement") -> bool:
        return equivalent(self.root, other.root)
