"""
Schemas

Error taxonomy and canonical serialization shared by the pipeline.
"""

from .canonical import canonical_equals, dumps_canonical, utc_isoformat
from .errors import (
    BodyHandlerMissingException,
    ComplianceException,
    ComplianceSeverity,
    DecodingException,
    EncodingException,
    ErrorKinds,
    HttpClientError,
    HttpClientException,
    TransportException,
)

__all__ = [
    # Canonical
    "canonical_equals",
    "dumps_canonical",
    "utc_isoformat",
    # Errors
    "BodyHandlerMissingException",
    "ComplianceException",
    "ComplianceSeverity",
    "DecodingException",
    "EncodingException",
    "ErrorKinds",
    "HttpClientError",
    "HttpClientException",
    "TransportException",
]
