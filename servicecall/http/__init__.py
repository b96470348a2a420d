"""
HTTP Pipeline Values

Request/response value objects, phase timing, transports and the
transaction that binds them.
"""

from .request import HttpRequest, normalize_headers
from .response import HttpResponse, HttpResponseTime
from .transport import (
    TRANSPORT_SETTINGS_KEY,
    RequestsTransport,
    Transport,
    TransportResult,
)
from .transaction import Transaction, TransactionState

__all__ = [
    "HttpRequest",
    "HttpResponse",
    "HttpResponseTime",
    "RequestsTransport",
    "TRANSPORT_SETTINGS_KEY",
    "Transaction",
    "TransactionState",
    "Transport",
    "TransportResult",
    "normalize_headers",
]
