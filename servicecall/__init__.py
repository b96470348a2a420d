"""
servicecall - client-side HTTP call abstraction.

A logical call is resolved into a request, executed through a transport
(or intercepted by a mock), timed, decoded and checked for compliance.
"""

from .body_handlers import BodyHandler, FormBodyHandler, JsonBodyHandler, RawBodyHandler
from .client import CallPlan, Execute, HttpClient, HttpMethods, Intercepted
from .config import ClientConfig
from .http import (
    HttpRequest,
    HttpResponse,
    HttpResponseTime,
    RequestsTransport,
    Transaction,
    TransactionState,
    Transport,
    TransportResult,
)
from .mock import MockRegistry, MockResponse, get_default_registry, set_default_registry
from .quality import (
    CheckResult,
    ComplianceRule,
    DecodableBodyRule,
    MaxDurationRule,
    RequiredHeadersRule,
    ResponseQualityAssurance,
    StatusBelowRule,
)
from .receipts import ReceiptRecorder, TransactionReceipt
from .schemas import (
    BodyHandlerMissingException,
    ComplianceException,
    DecodingException,
    EncodingException,
    ErrorKinds,
    HttpClientError,
    HttpClientException,
    TransportException,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "CallPlan",
    "Execute",
    "HttpClient",
    "HttpMethods",
    "Intercepted",
    "ClientConfig",
    # Body handlers
    "BodyHandler",
    "FormBodyHandler",
    "JsonBodyHandler",
    "RawBodyHandler",
    # Pipeline values
    "HttpRequest",
    "HttpResponse",
    "HttpResponseTime",
    "RequestsTransport",
    "Transaction",
    "TransactionState",
    "Transport",
    "TransportResult",
    # Mocks
    "MockRegistry",
    "MockResponse",
    "get_default_registry",
    "set_default_registry",
    # Quality assurance
    "CheckResult",
    "ComplianceRule",
    "DecodableBodyRule",
    "MaxDurationRule",
    "RequiredHeadersRule",
    "ResponseQualityAssurance",
    "StatusBelowRule",
    # Receipts
    "ReceiptRecorder",
    "TransactionReceipt",
    # Errors
    "BodyHandlerMissingException",
    "ComplianceException",
    "DecodingException",
    "EncodingException",
    "ErrorKinds",
    "HttpClientError",
    "HttpClientException",
    "TransportException",
]
