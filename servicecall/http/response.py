"""
HTTP Response

Value describing the outcome of one transaction: status, headers, raw body,
phase timing and an optional structured error. Decoding is lazy and uses
a body handler attached after execution by the client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from servicecall.schemas.errors import BodyHandlerMissingException, HttpClientError

if TYPE_CHECKING:
    from servicecall.body_handlers import BodyHandler


class HttpResponseTime(BaseModel):
    """
    Phase timing breakdown of a transaction, in seconds.

    Unmeasured phases (mock paths, transports that cannot observe them)
    stay at zero.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    total: float = Field(default=0.0, ge=0.0, description="Whole transaction")
    connect: float = Field(default=0.0, ge=0.0, description="DNS lookup and TCP connect")
    handshake: float = Field(default=0.0, ge=0.0, description="TLS handshake")
    first_byte: float = Field(default=0.0, ge=0.0, description="Time to first byte")
    transfer: float = Field(default=0.0, ge=0.0, description="Body transfer")

    @classmethod
    def zero(cls) -> "HttpResponseTime":
        return cls()

    def to_dict(self) -> dict[str, float]:
        return {
            "total": self.total,
            "connect": self.connect,
            "handshake": self.handshake,
            "first_byte": self.first_byte,
            "transfer": self.transfer,
        }


@dataclass
class HttpResponse:
    """
    Response of an HTTP transaction.

    Usage:
        response = client.request("GET", "/users/1")
        if response.error is None:
            user = response.get_decoded_body()
    """
    method: Optional[str] = None
    url: Optional[str] = None
    status: Optional[int] = None
    headers: dict[str, str] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    body: Optional[str] = None
    time: HttpResponseTime = field(default_factory=HttpResponseTime)
    body_handler: Optional["BodyHandler"] = None
    error: Optional[HttpClientError] = None

    @property
    def ok(self) -> bool:
        """Check if the call completed with a 2xx status and no attached error."""
        return self.error is None and self.status is not None and 200 <= self.status < 300

    def set_body_handler(self, body_handler: "BodyHandler") -> "HttpResponse":
        self.body_handler = body_handler
        return self

    def set_error(self, error: HttpClientError) -> "HttpResponse":
        self.error = error
        return self

    def get_decoded_body(self) -> Any:
        """
        Decode the raw body with the attached handler.

        Raises:
            BodyHandlerMissingException: If no handler was attached
            DecodingException: If the body cannot be decoded
        """
        if self.body_handler is None:
            raise BodyHandlerMissingException(
                message="No body handler attached to the response",
                details={"method": self.method, "url": self.url},
            )
        return self.body_handler.decode(self.body)

    def to_dict(self) -> dict[str, Any]:
        """Stable snapshot for logging and receipts."""
        return {
            "status": self.status,
            "headers": dict(self.headers),
            "time": self.time.to_dict(),
            "body": self.body,
            "error": self.error.to_dict() if self.error else None,
        }
