"""
JSON Body Handler

The default handler. Symmetric for every JSON-representable value:
decode(encode(v)) == v.
"""

from __future__ import annotations

import json
from typing import Any

from servicecall.schemas.errors import DecodingException, EncodingException

from .base import BodyHandler


class JsonBodyHandler(BodyHandler):
    """Encodes bodies as UTF-8 JSON and decodes JSON responses."""

    content_type = "application/json; charset=utf-8"

    def encode(self, value: Any) -> bytes:
        try:
            text = json.dumps(value, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise EncodingException(
                message=f"Body is not JSON-serializable: {e}",
                details={"type": type(value).__name__, "error": str(e)},
            ) from e
        return text.encode("utf-8")

    def decode(self, raw: str | bytes | None) -> Any:
        text = self._as_text(raw)
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodingException(
                message=f"Response body is not valid JSON: {e.msg}",
                details={"line": e.lineno, "column": e.colno, "preview": text[:120]},
            ) from e
