"""
HTTP Request

Value describing one resolved call. Built once by the client and not
mutated after it is handed to a Transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from servicecall.schemas.errors import BodyHandlerMissingException

if TYPE_CHECKING:
    from servicecall.body_handlers import BodyHandler


def normalize_headers(headers: Optional[dict[str, str]]) -> dict[str, str]:
    """Lower-case header names; later keys win on collisions."""
    return {str(k).lower(): v for k, v in (headers or {}).items()}


def _json_safe(value: Any) -> Any:
    """Render option values (handlers, objects) for logging."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return type(value).__name__


@dataclass(frozen=True)
class HttpRequest:
    """
    A concrete request: method, absolute URL, headers, options and a
    logical body encoded lazily by its body handler.

    A body of None means "no payload". Fields cannot be reassigned once
    built; derive a new request with dataclasses.replace() instead.
    """
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    body: Any = None
    body_handler: Optional["BodyHandler"] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", normalize_headers(self.headers))

    def encode_body(self) -> Optional[bytes]:
        """
        Encode the body with the request's handler.

        Raises:
            BodyHandlerMissingException: If there is a body but no handler
            EncodingException: If the handler rejects the body
        """
        if self.body is None:
            return None
        if self.body_handler is None:
            raise BodyHandlerMissingException(
                message="Request has a body but no body handler",
                details={"method": self.method, "url": self.url},
            )
        return self.body_handler.encode(self.body)

    def prepared_headers(self) -> dict[str, str]:
        """Headers to put on the wire, adding the handler's content type if missing."""
        headers = dict(self.headers)
        content_type = getattr(self.body_handler, "content_type", None)
        if self.body is not None and content_type and "content-type" not in headers:
            headers["content-type"] = content_type
        return headers

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "options": _json_safe(self.options),
            "body": _json_safe(self.body),
        }
