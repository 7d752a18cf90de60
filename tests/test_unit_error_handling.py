"""
Tests for codec error types and error codes.

Tests cover:
- Error hierarchy
- Message and details on every error
- Stable error codes
"""

import pytest

from endorsement_policy.core.errors import (
    ERROR_CODE_MAP,
    DeserializationError,
    EncodingError,
    PolicyCodecError,
    ValidationError,
    get_error_code,
)


class TestErrorHierarchy:
    """Tests for the exception classes."""

    @pytest.mark.anyio
    @pytest.mark.parametrize("error_cls", [ValidationError, DeserializationError, EncodingError])
    async def test_subclasses_base_error(self, error_cls):
        """Test that every codec error can be caught as PolicyCodecError."""
        with pytest.raises(PolicyCodecError):
            raise error_cls("boom")

    @pytest.mark.anyio
    async def test_details_default_to_empty_dict(self):
        """Test that details are never None."""
        error = DeserializationError("bad bytes")

        assert error.message == "bad bytes"
        assert error.details == {}
        assert str(error) == "bad bytes"

    @pytest.mark.anyio
    async def test_details_are_kept(self):
        """Test that details passed in are exposed unchanged."""
        error = ValidationError("bad tree", details={"path": "$.children[0]"})
        assert error.details == {"path": "$.children[0]"}


class TestErrorCodes:
    """Tests for get_error_code."""

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "error,code",
        [
            (ValidationError("x"), "INVALID_EXPRESSION"),
            (DeserializationError("x"), "MALFORMED_POLICY_BYTES"),
            (EncodingError("x"), "ENCODING_FAILED"),
        ],
    )
    async def test_known_errors(self, error, code):
        """Test the code of each codec error."""
        assert get_error_code(error) == code

    @pytest.mark.anyio
    async def test_unknown_errors_are_internal(self):
        """Test that anything else maps to INTERNAL_ERROR."""
        assert get_error_code(RuntimeError("x")) == "INTERNAL_ERROR"
        assert get_error_code(PolicyCodecError("x")) == "INTERNAL_ERROR"

    @pytest.mark.anyio
    async def test_codes_are_unique(self):
        """Test that no two errors share a code."""
        assert len(set(ERROR_CODE_MAP.values())) == len(ERROR_CODE_MAP)
