"""
Form Body Handler

application/x-www-form-urlencoded bodies.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qs, urlencode

from servicecall.schemas.errors import DecodingException, EncodingException

from .base import BodyHandler


class FormBodyHandler(BodyHandler):
    """
    Encodes a mapping as a urlencoded form.

    List values repeat the key. Bytes values are percent-encoded as-is.
    Decoding unwraps keys that occur once.
    """

    content_type = "application/x-www-form-urlencoded"

    def encode(self, value: Any) -> bytes:
        if not isinstance(value, Mapping):
            raise EncodingException(
                message="Form bodies must be mappings",
                details={"type": type(value).__name__},
            )
        pairs: list[tuple[str, str | bytes]] = []
        for key, item in value.items():
            items = item if isinstance(item, (list, tuple)) else [item]
            for element in items:
                if isinstance(element, (Mapping, list, tuple)):
                    raise EncodingException(
                        message=f"Nested value for form field '{key}' is not supported",
                        details={"field": str(key), "type": type(element).__name__},
                    )
                if element is None:
                    element = ""
                elif not isinstance(element, (str, bytes)):
                    element = str(element)
                pairs.append((str(key), element))
        return urlencode(pairs).encode("ascii")

    def decode(self, raw: str | bytes | None) -> Any:
        text = self._as_text(raw)
        if text is None:
            return None
        try:
            parsed = parse_qs(text, keep_blank_values=True, strict_parsing=True)
        except ValueError as e:
            raise DecodingException(
                message=f"Response body is not a urlencoded form: {e}",
                details={"preview": text[:120]},
            ) from e
        return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}
