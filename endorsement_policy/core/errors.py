"""
Domain-specific exceptions for the endorsement policy codec.

These exceptions represent failures at the codec boundary and are mapped
to stable error codes for callers that embed the codec in a service.
"""

from typing import Any


class PolicyCodecError(Exception):
    """Base exception for all endorsement policy codec errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(PolicyCodecError):
    """
    Raised when an expression tree is not well-formed.

    Examples:
    - Combinator with no children
    - AtLeast threshold outside [0, len(children)]
    - Principal with an empty MSP identifier
    """

    pass


class DeserializationError(PolicyCodecError):
    """
    Raised when bytes cannot be parsed into an endorsement policy message.

    Examples:
    - Truncated buffer
    - Corrupt varint or length prefix
    - Input that is not a bytes-like object
    - Payload larger than the configured limit
    """

    pass


class EncodingError(PolicyCodecError):
    """
    Raised when an expression cannot be lowered to the wire message.

    Examples:
    - Threshold outside the int32 range of min_endorsements
    - Serialization failure inside the message library
    """

    pass


# Stable error codes for embedding callers
ERROR_CODE_MAP = {
    ValidationError: "INVALID_EXPRESSION",
    DeserializationError: "MALFORMED_POLICY_BYTES",
    EncodingError: "ENCODING_FAILED",
}


def get_error_code(error: Exception) -> str:
    """
    Get the stable error code for a given exception.

    Args:
        error: The exception instance

    Returns:
        Error code (defaults to "INTERNAL_ERROR" for unknown errors)
    """
    return ERROR_CODE_MAP.get(type(error), "INTERNAL_ERROR")
