"""
Body Handler Tests

Tests for the pluggable encode/decode handlers:
1. JSON handler is symmetric for JSON-representable values
2. Null and blank bodies decode to None
3. Malformed payloads raise DecodingException
4. Unencodable values raise EncodingException
5. Form and raw handlers
"""

import pytest

from servicecall.body_handlers import BodyHandler, FormBodyHandler, JsonBodyHandler, RawBodyHandler
from servicecall.schemas.errors import DecodingException, EncodingException, ErrorKinds


# =============================================================================
# JSON Handler
# =============================================================================

class TestJsonBodyHandler:
    """Tests for JsonBodyHandler."""

    @pytest.mark.parametrize("value", [
        {"name": "Ada", "tags": ["a", "b"], "active": True, "score": 1.5},
        [1, 2, {"nested": None}],
        "plain string",
        42,
        {"unicode": "café ☕"},
    ])
    def test_decode_inverts_encode(self, value):
        """decode(encode(v)) == v for JSON values."""
        handler = JsonBodyHandler()
        assert handler.decode(handler.encode(value)) == value

    def test_encode_is_utf8_without_escaping(self):
        """Non-ASCII text is written as UTF-8."""
        assert JsonBodyHandler().encode({"k": "é"}) == '{"k": "é"}'.encode("utf-8")

    @pytest.mark.parametrize("raw", [None, "", "   ", b""])
    def test_empty_body_decodes_to_none(self, raw):
        """Null or blank bodies are absent, not errors."""
        assert JsonBodyHandler().decode(raw) is None

    def test_decode_accepts_bytes(self):
        assert JsonBodyHandler().decode(b'{"a": 1}') == {"a": 1}

    def test_malformed_json_raises_decoding_error(self):
        """Malformed JSON raises DecodingException with position details."""
        with pytest.raises(DecodingException) as exc_info:
            JsonBodyHandler().decode("<html>oops</html>")
        assert exc_info.value.kind == ErrorKinds.DECODING_ERROR
        assert "line" in exc_info.value.details

    def test_invalid_utf8_raises_decoding_error(self):
        """Bytes that are not UTF-8 are rejected, not replaced."""
        with pytest.raises(DecodingException) as exc_info:
            JsonBodyHandler().decode(b'{"a": "\xff"}')
        assert exc_info.value.details["offset"] == 7

    def test_non_serializable_raises_encoding_error(self):
        with pytest.raises(EncodingException) as exc_info:
            JsonBodyHandler().encode({"when": object()})
        assert exc_info.value.kind == ErrorKinds.ENCODING_ERROR

    def test_nan_is_rejected(self):
        """NaN is not valid JSON."""
        with pytest.raises(EncodingException):
            JsonBodyHandler().encode({"x": float("nan")})

    def test_content_type(self):
        assert JsonBodyHandler.content_type.startswith("application/json")


# =============================================================================
# Form Handler
# =============================================================================

class TestFormBodyHandler:
    """Tests for FormBodyHandler."""

    def test_encode_mapping(self):
        assert FormBodyHandler().encode({"a": "1", "b": "x y"}) == b"a=1&b=x+y"

    def test_list_values_repeat_key(self):
        assert FormBodyHandler().encode({"a": "1", "b": ["x", "y"]}) == b"a=1&b=x&b=y"

    def test_decode_unwraps_single_values(self):
        decoded = FormBodyHandler().decode("a=1&b=x&b=y")
        assert decoded == {"a": "1", "b": ["x", "y"]}

    def test_decode_empty(self):
        assert FormBodyHandler().decode("") is None

    def test_non_mapping_rejected(self):
        with pytest.raises(EncodingException):
            FormBodyHandler().encode(["a", "b"])

    def test_nested_value_rejected(self):
        with pytest.raises(EncodingException) as exc_info:
            FormBodyHandler().encode({"a": {"b": 1}})
        assert exc_info.value.details["field"] == "a"

    def test_bytes_values_are_percent_encoded(self):
        assert FormBodyHandler().encode({"a": b"x y", "b": b"\xff"}) == b"a=x+y&b=%FF"

    def test_scalar_values_are_stringified(self):
        assert FormBodyHandler().encode({"n": 3, "empty": None}) == b"n=3&empty="

    def test_invalid_utf8_raises_decoding_error(self):
        with pytest.raises(DecodingException):
            FormBodyHandler().decode(b"a=\xfe")

    def test_malformed_form_raises_decoding_error(self):
        with pytest.raises(DecodingException):
            FormBodyHandler().decode("not-a-form")


# =============================================================================
# Raw Handler
# =============================================================================

class TestRawBodyHandler:
    """Tests for RawBodyHandler."""

    def test_bytes_pass_through(self):
        assert RawBodyHandler().encode(b"\x00\x01") == b"\x00\x01"

    def test_text_is_utf8_encoded(self):
        assert RawBodyHandler().encode("héllo") == "héllo".encode("utf-8")

    def test_other_types_rejected(self):
        with pytest.raises(EncodingException):
            RawBodyHandler().encode({"a": 1})

    def test_decode_returns_text(self):
        assert RawBodyHandler().decode("<html/>") == "<html/>"
        assert RawBodyHandler().decode(b"abc") == "abc"
        assert RawBodyHandler().decode(None) is None

    def test_invalid_utf8_raises_decoding_error(self):
        with pytest.raises(DecodingException) as exc_info:
            RawBodyHandler().decode(b"ok\x80")
        assert exc_info.value.details["offset"] == 2

    def test_is_a_body_handler(self):
        assert isinstance(RawBodyHandler(), BodyHandler)
        assert RawBodyHandler.content_type is None
