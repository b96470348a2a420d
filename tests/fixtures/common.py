"""
Common factories shared by all servicecall tests.
"""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from typing import Any, Optional

from servicecall.client import HttpClient
from servicecall.http import HttpRequest, HttpResponseTime, TransportResult
from servicecall.mock import MockRegistry
from servicecall.schemas.errors import TransportException


def make_result(
    status: int = 200,
    body: Optional[str] = '{"ok": true}',
    headers: Optional[dict[str, str]] = None,
    total: float = 0.01,
) -> TransportResult:
    """Create a TransportResult with plausible timing."""
    return TransportResult(
        status=status,
        headers=headers if headers is not None else {"content-type": "application/json"},
        body=body,
        time=HttpResponseTime(total=total, first_byte=total / 2, transfer=total / 2),
    )


class StubTransport:
    """
    Transport double.

    Answers every call with the configured result, or raises the configured
    exception. Records (request, encoded body) pairs in calls.
    """

    def __init__(
        self,
        result: Optional[TransportResult] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.result = result or make_result()
        self.error = error
        self.calls: list[tuple[HttpRequest, Optional[bytes]]] = []

    def send(self, request: HttpRequest, body: Optional[bytes]) -> TransportResult:
        self.calls.append((request, body))
        if self.error is not None:
            raise self.error
        return self.result

    @classmethod
    def refusing(cls, message: str = "connection refused") -> "StubTransport":
        """Transport that fails every call like a refused connection."""
        return cls(error=TransportException(message, details={"exception": "ConnectionError"}))

    @property
    def last_request(self) -> HttpRequest:
        return self.calls[-1][0]

    @property
    def last_body(self) -> Optional[bytes]:
        return self.calls[-1][1]


class FakeSession:
    """
    Stand-in for requests.Session used to test RequestsTransport.
    """

    def __init__(
        self,
        status_code: int = 200,
        text: str = '{"id": 1}',
        headers: Optional[dict[str, str]] = None,
        elapsed_ms: float = 5.0,
        error: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self.text = text
        self.headers = headers if headers is not None else {"Content-Type": "application/json"}
        self.elapsed = timedelta(milliseconds=elapsed_ms)
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def request(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            status_code=self.status_code,
            text=self.text,
            headers=dict(self.headers),
            elapsed=self.elapsed,
        )

    def close(self) -> None:
        self.closed = True


def make_client(
    base_url: str = "https://a",
    transport: Optional[StubTransport] = None,
    mocks: Optional[MockRegistry] = None,
    **kwargs: Any,
) -> HttpClient:
    """Create a client wired to test doubles."""
    return HttpClient(
        base_url,
        transport=transport or StubTransport(),
        mocks=mocks if mocks is not None else MockRegistry(),
        **kwargs,
    )
