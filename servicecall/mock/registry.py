"""
Mock Registry

Canned responses keyed by the exact (method, url) pair. A hit replaces
network execution entirely: no transaction, no quality assurance check.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, TYPE_CHECKING

from servicecall.body_handlers import BodyHandler, JsonBodyHandler
from servicecall.http.request import normalize_headers
from servicecall.http.response import HttpResponse, HttpResponseTime
from servicecall.schemas.errors import HttpClientError

if TYPE_CHECKING:
    from servicecall.receipts import TransactionReceipt


logger = logging.getLogger(__name__)


@dataclass
class MockResponse:
    """Accessor for a prebuilt response."""
    response: HttpResponse

    def get(self) -> HttpResponse:
        return self.response


class MockRegistry:
    """
    Lookup table of canned responses.

    Usage:
        registry = MockRegistry()
        registry.register("GET", "https://api.example.com/users", body=[{"id": 1}])

        client = HttpClient("https://api.example.com", mocks=registry)
        client.get("/users")  # -> [{"id": 1}], no network I/O
    """

    def __init__(self) -> None:
        self._mocks: dict[tuple[str, str], MockResponse] = {}

    def register(
        self,
        method: str,
        url: str,
        *,
        status: int = 200,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
        body_handler: Optional[BodyHandler] = None,
        time: Optional[HttpResponseTime] = None,
    ) -> MockResponse:
        """
        Register a canned response built from a logical body.

        The body is encoded with body_handler (JSON by default) and the same
        handler is attached to the response so callers can decode it.
        """
        handler = body_handler or JsonBodyHandler()
        raw = handler.encode(body).decode("utf-8") if body is not None else None
        response = HttpResponse(
            method=method,
            url=url,
            status=status,
            headers=normalize_headers(headers),
            body=raw,
            time=time or HttpResponseTime.zero(),
            body_handler=handler,
        )
        return self.register_response(method, url, response)

    def register_response(self, method: str, url: str, response: HttpResponse) -> MockResponse:
        """Register a prebuilt response verbatim."""
        mock = MockResponse(response)
        self._mocks[(method, url)] = mock
        return mock

    def find(self, method: str, url: str) -> Optional[MockResponse]:
        """Exact lookup on (method, url); no wildcard or partial matching."""
        mock = self._mocks.get((method, url))
        if mock is not None:
            logger.debug(f"Mock hit for {method} {url}")
        return mock

    def remove(self, method: str, url: str) -> bool:
        return self._mocks.pop((method, url), None) is not None

    def clear(self) -> None:
        self._mocks.clear()

    def __len__(self) -> int:
        return len(self._mocks)

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._mocks

    @classmethod
    def from_receipts(
        cls,
        receipts: Iterable["TransactionReceipt"],
        *,
        body_handler: Optional[BodyHandler] = None,
    ) -> "MockRegistry":
        """
        Build a registry that replays recorded transactions.

        Later receipts for the same (method, url) win. Receipts that never
        completed are skipped.
        """
        registry = cls()
        for receipt in receipts:
            if not receipt.is_complete:
                continue
            snapshot = receipt.response
            error = snapshot.get("error")
            response = HttpResponse(
                method=receipt.method,
                url=receipt.url,
                status=snapshot.get("status"),
                headers=dict(snapshot.get("headers") or {}),
                body=snapshot.get("body"),
                time=HttpResponseTime(**(snapshot.get("time") or {})),
                body_handler=copy.copy(body_handler) if body_handler else JsonBodyHandler(),
                error=HttpClientError(**error) if error else None,
            )
            registry.register_response(receipt.method, receipt.url, response)
        return registry


# Process default registry, shared by clients that are not given one
_default_registry: Optional[MockRegistry] = None


def get_default_registry() -> MockRegistry:
    """Get the process default mock registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = MockRegistry()
    return _default_registry


def set_default_registry(registry: MockRegistry) -> None:
    """Set the process default mock registry."""
    global _default_registry
    _default_registry = registry
