"""
Raw Body Handler

Passthrough for text and binary payloads.
"""

from __future__ import annotations

from typing import Any

from servicecall.schemas.errors import EncodingException

from .base import BodyHandler


class RawBodyHandler(BodyHandler):
    """Sends str/bytes untouched and returns response bodies as text."""

    content_type = None

    def encode(self, value: Any) -> bytes:
        if isinstance(value, bytes):
            return value
        if isinstance(value, str):
            return value.encode("utf-8")
        raise EncodingException(
            message="Raw bodies must be str or bytes",
            details={"type": type(value).__name__},
        )

    def decode(self, raw: str | bytes | None) -> Any:
        if not raw:
            return None
        if isinstance(raw, bytes):
            return self._decode_bytes(raw)
        return raw
