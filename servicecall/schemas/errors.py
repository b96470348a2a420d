"""
Error Taxonomy

Structured failure descriptors for the transaction pipeline.
Defines both Pydantic models (attached to responses, serialized for logging)
and Python exceptions for control flow.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Kinds (Machine-Readable Constants)
# =============================================================================

class ErrorKinds:
    """Stable machine-readable error kinds."""

    # Connection refused, timeout, DNS failure
    TRANSPORT_ERROR = "TransportError"

    # Quality assurance violation on a completed transaction
    COMPLIANCE_ERROR = "ComplianceError"

    # Body handler failures
    ENCODING_ERROR = "EncodingError"
    DECODING_ERROR = "DecodingError"


# Severity of a compliance check; "error" is the severity of non-compliance errors.
ComplianceSeverity = Literal["info", "warn", "error", "fatal"]


# =============================================================================
# Pydantic Error Model (Attached to Responses)
# =============================================================================

class HttpClientError(BaseModel):
    """
    Structured error attached to an HttpResponse.

    Transport failures and compliance violations are carried on the response
    through this model instead of being raised, so callers can introspect
    them after the call returns.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    kind: str = Field(
        ...,
        description="Stable machine-readable error kind",
        examples=[ErrorKinds.TRANSPORT_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional JSON-serializable details about the error",
    )
    severity: ComplianceSeverity = Field(
        default="error",
        description="Severity of the failure",
    )

    def to_dict(self) -> dict[str, Any]:
        """Stable serialization used by HttpResponse.to_dict()."""
        return {
            "kind": self.kind,
            "message": self.message,
            "details": dict(self.details),
            "severity": self.severity,
        }

    def to_exception(self) -> "HttpClientException":
        """Convert this error model to a raisable exception of the matching kind."""
        exc_class = _EXCEPTIONS_BY_KIND.get(self.kind, HttpClientException)
        return exc_class(
            message=self.message,
            details=self.details,
            severity=self.severity,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HttpClientException(Exception):
    """
    Base exception for all servicecall errors.

    Carries structured error information and converts to/from
    HttpClientError models.
    """

    kind: str = "HttpClientError"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        severity: ComplianceSeverity = "error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.severity = severity

    def to_error_model(self) -> HttpClientError:
        """Convert this exception to an HttpClientError model."""
        return HttpClientError(
            kind=self.kind,
            message=self.message,
            details=self.details,
            severity=self.severity,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind!r}, message={self.message!r})"


class TransportException(HttpClientException):
    """Raised by a transport when the request could not be completed."""

    kind = ErrorKinds.TRANSPORT_ERROR


class ComplianceException(HttpClientException):
    """Raised by the quality assurance checker for fatal violations."""

    kind = ErrorKinds.COMPLIANCE_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        severity: ComplianceSeverity = "fatal",
    ) -> None:
        super().__init__(message=message, details=details, severity=severity)


class EncodingException(HttpClientException):
    """Raised when a body handler cannot encode a request body."""

    kind = ErrorKinds.ENCODING_ERROR


class DecodingException(HttpClientException):
    """Raised when a body handler cannot decode a response body."""

    kind = ErrorKinds.DECODING_ERROR


class BodyHandlerMissingException(HttpClientException):
    """Raised when a response body is decoded before a handler was attached."""

    kind = "BodyHandlerMissing"


_EXCEPTIONS_BY_KIND: dict[str, type[HttpClientException]] = {
    ErrorKinds.TRANSPORT_ERROR: TransportException,
    ErrorKinds.COMPLIANCE_ERROR: ComplianceException,
    ErrorKinds.ENCODING_ERROR: EncodingException,
    ErrorKinds.DECODING_ERROR: DecodingException,
}
