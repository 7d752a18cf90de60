"""
Wire rule tree messages.

The rule tree is a protobuf schema (see ledger_messages.proto next to this
module). A wire rule records only its principals, its nested rules and a
minimum endorsement count; there is no field saying whether a node was an
AND, an OR or a threshold.

The message classes are built at import time from a FileDescriptorProto in a
private descriptor pool, so no generated code is needed and the schema cannot
clash with other copies registered in the default pool.
"""

import logging

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, EncodeError

from endorsement_policy.core.errors import DeserializationError, EncodingError
from endorsement_policy.domain.enums import WireRole

logger = logging.getLogger(__name__)

PROTO_PACKAGE = "ledger_messages"

_Field = descriptor_pb2.FieldDescriptorProto


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    """Describe ledger_messages.proto as a FileDescriptorProto."""
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="ledger_messages.proto", package=PROTO_PACKAGE, syntax="proto3"
    )

    principal = file_proto.message_type.add(name="EndorsementPrincipal")
    role_enum = principal.enum_type.add(name="Role")
    for wire_role in WireRole:
        role_enum.value.add(name=wire_role.name, number=wire_role.value)
    principal.field.add(
        name="msp_id", number=1, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL
    )
    principal.field.add(
        name="role",
        number=2,
        type=_Field.TYPE_ENUM,
        label=_Field.LABEL_OPTIONAL,
        type_name=f".{PROTO_PACKAGE}.EndorsementPrincipal.Role",
    )

    rule = file_proto.message_type.add(name="EndorsementRule")
    rule.field.add(
        name="min_endorsements", number=1, type=_Field.TYPE_INT32, label=_Field.LABEL_OPTIONAL
    )
    rule.field.add(
        name="rules",
        number=2,
        type=_Field.TYPE_MESSAGE,
        label=_Field.LABEL_REPEATED,
        type_name=f".{PROTO_PACKAGE}.EndorsementRule",
    )
    rule.field.add(
        name="principals",
        number=3,
        type=_Field.TYPE_MESSAGE,
        label=_Field.LABEL_REPEATED,
        type_name=f".{PROTO_PACKAGE}.EndorsementPrincipal",
    )

    policy = file_proto.message_type.add(name="EndorsementPolicy")
    policy.field.add(
        name="rule",
        number=1,
        type=_Field.TYPE_MESSAGE,
        label=_Field.LABEL_OPTIONAL,
        type_name=f".{PROTO_PACKAGE}.EndorsementRule",
    )

    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())


def _message_class(name: str) -> type:
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.{name}"))


EndorsementPrincipal = _message_class("EndorsementPrincipal")
EndorsementRule = _message_class("EndorsementRule")
EndorsementPolicy = _message_class("EndorsementPolicy")


def serialize_policy(policy) -> bytes:
    """
    Serialize an EndorsementPolicy message to bytes.

    Raises:
        EncodingError: If the message library refuses to serialize the message
    """
    try:
        return policy.SerializeToString()
    except EncodeError as e:
        raise EncodingError(
            "Failed to serialize endorsement policy", details={"error": str(e)}
        ) from e


def parse_policy(data: bytes | bytearray | memoryview, max_bytes: int | None = None):
    """
    Parse bytes into an EndorsementPolicy message.

    Args:
        data: Serialized policy
        max_bytes: Optional upper bound on the payload size

    Returns:
        EndorsementPolicy message

    Raises:
        DeserializationError: If the input is not bytes, is too large, or is
            malformed or truncated
    """
    if isinstance(data, (bytearray, memoryview)):
        data = bytes(data)
    if not isinstance(data, bytes):
        raise DeserializationError(
            "Endorsement policy payload must be bytes",
            details={"type": type(data).__name__},
        )

    if max_bytes is not None and len(data) > max_bytes:
        raise DeserializationError(
            f"Endorsement policy payload exceeds {max_bytes} bytes",
            details={"size": len(data), "max_bytes": max_bytes},
        )

    try:
        return EndorsementPolicy.FromString(data)
    except (DecodeError, ValueError) as e:
        # ValueError covers invalid UTF-8 in msp_id under the pure-Python backend
        logger.warning("Rejected malformed endorsement policy payload (%d bytes)", len(data))
        raise DeserializationError(
            "Malformed endorsement policy payload",
            details={"size": len(data), "error": str(e)},
        ) from e
