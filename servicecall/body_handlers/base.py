"""
Body Handler Base

Encode/decode capability for request and response payloads.
Handlers are injected explicitly (client defaults or per-call options),
never chosen by inspecting the payload.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from servicecall.schemas.errors import DecodingException


class BodyHandler(ABC):
    """
    Abstract body handler.

    Subclasses declare the content type they produce and implement
    encode() for outgoing bodies and decode() for incoming ones.
    Decoding a null or blank body yields None, never an error.
    """

    content_type: Optional[str] = None

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        """
        Encode a logical body into wire bytes.

        Raises:
            EncodingException: If the value cannot be encoded
        """
        ...

    @abstractmethod
    def decode(self, raw: str | bytes | None) -> Any:
        """
        Decode wire bytes into a logical structure.

        Raises:
            DecodingException: If the payload is malformed
        """
        ...

    @staticmethod
    def _decode_bytes(raw: bytes) -> str:
        """
        Decode a byte body as UTF-8.

        Raises:
            DecodingException: If the bytes are not valid UTF-8
        """
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingException(
                message=f"Response body is not valid UTF-8: {e.reason}",
                details={"offset": e.start, "reason": e.reason},
            ) from e

    @classmethod
    def _as_text(cls, raw: str | bytes | None) -> Optional[str]:
        """Normalize a raw body to text; None when empty."""
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = cls._decode_bytes(raw)
        if not raw.strip():
            return None
        return raw

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
