"""
HTTP Client

Façade applications call to reach remote services. Resolves URLs, consults
the mock registry, builds and runs a Transaction, attaches the response
body handler and runs the quality assurance checker.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union, TYPE_CHECKING

from servicecall.body_handlers import BodyHandler, JsonBodyHandler
from servicecall.http.request import HttpRequest, normalize_headers
from servicecall.http.response import HttpResponse
from servicecall.http.transaction import Transaction
from servicecall.http.transport import TRANSPORT_SETTINGS_KEY, RequestsTransport, Transport
from servicecall.mock.registry import MockRegistry, get_default_registry
from servicecall.quality import MaxDurationRule, ResponseQualityAssurance, StatusBelowRule

if TYPE_CHECKING:
    from servicecall.config import ClientConfig
    from servicecall.receipts import ReceiptRecorder


logger = logging.getLogger(__name__)


class HttpMethods:
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


# Option keys read by the client
OPTION_BASE_URL = "baseUrl"
OPTION_REQUEST_BODY_HANDLER = "requestBodyHandler"
OPTION_RESPONSE_BODY_HANDLER = "responseBodyHandler"

DEFAULT_HEADERS: dict[str, str] = {
    "content-type": "application/json; charset=utf-8",
    "connection": "keep-alive",
}

# Option keys whose mapping values push_option merges key by key
DEFAULT_DEEP_MERGE_KEYS: frozenset[str] = frozenset({TRANSPORT_SETTINGS_KEY})


@dataclass(frozen=True)
class Intercepted:
    """A mock matched: the canned response is returned as-is."""
    response: HttpResponse


@dataclass(frozen=True)
class Execute:
    """No mock matched: the transaction must be run."""
    transaction: Transaction


CallPlan = Union[Intercepted, Execute]


def _copy_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Copy options one level down so nested settings are not shared."""
    return {k: dict(v) if isinstance(v, Mapping) else v for k, v in options.items()}


def _first(*candidates: Any) -> Any:
    return next((c for c in candidates if c is not None), None)


class HttpClient:
    """
    HTTP client façade.

    The last transaction is per-instance state overwritten by every
    non-mocked call. One caller at a time; use spawn() to get a
    call-scoped child for concurrent work.

    Usage:
        client = HttpClient("https://api.example.com").set_service_name("users")

        user = client.get("/users/1")
        client.post("/users", {"name": "Ada"})

        response = client.request("DELETE", "/users/1")
        if response.error is not None:
            ...
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
        options: Optional[dict[str, Any]] = None,
        request_body_handler: Optional[BodyHandler] = None,
        response_body_handler: Optional[BodyHandler] = None,
        *,
        transport: Optional[Transport] = None,
        mocks: Optional[MockRegistry] = None,
        quality_assurance: Optional[ResponseQualityAssurance] = None,
        recorder: Optional["ReceiptRecorder"] = None,
        service_name: Optional[str] = None,
        deep_merge_keys: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Prefix for request paths
            headers: Default headers (replaces the built-in defaults)
            options: Default options
            request_body_handler: Default encoder for request bodies
            response_body_handler: Default decoder for response bodies
            transport: Network transport (RequestsTransport by default)
            mocks: Mock registry (the process default registry if omitted)
            quality_assurance: Compliance checker (default rule set if omitted)
            recorder: Receipt recorder for executed transactions
            service_name: Logical service name for attribution
            deep_merge_keys: Option keys merged key by key by push_option
        """
        self._base_url = base_url or ""
        self._headers = normalize_headers(headers if headers is not None else DEFAULT_HEADERS)
        self._options = _copy_options(options or {})
        self.request_body_handler = request_body_handler or JsonBodyHandler()
        self.response_body_handler = response_body_handler or JsonBodyHandler()
        self.transport = transport or RequestsTransport()
        self._mocks = mocks
        self.quality_assurance = quality_assurance or ResponseQualityAssurance()
        self.recorder = recorder
        self._service_name = service_name
        self.deep_merge_keys = frozenset(deep_merge_keys) if deep_merge_keys is not None else DEFAULT_DEEP_MERGE_KEYS
        self._last_transaction: Optional[Transaction] = None

    @classmethod
    def from_config(cls, config: "ClientConfig", **kwargs: Any) -> "HttpClient":
        """Build a client from a ClientConfig; kwargs override collaborators."""
        headers = dict(DEFAULT_HEADERS)
        headers["user-agent"] = config.http.user_agent
        headers.update(normalize_headers(config.headers))

        rules = [StatusBelowRule(config.quality.max_status)]
        if config.quality.max_duration_s:
            rules.append(MaxDurationRule(config.quality.max_duration_s))

        kwargs.setdefault(
            "transport",
            RequestsTransport(
                timeout=config.http.timeout,
                verify=config.http.verify,
                proxy=config.http.proxy,
            ),
        )
        kwargs.setdefault("quality_assurance", ResponseQualityAssurance(rules))
        kwargs.setdefault("service_name", config.service_name)
        return cls(config.base_url, headers, config.options, **kwargs)

    @property
    def mocks(self) -> MockRegistry:
        return self._mocks if self._mocks is not None else get_default_registry()

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def set_service_name(self, service_name: Optional[str]) -> "HttpClient":
        self._service_name = service_name
        return self

    def get_service_name(self) -> Optional[str]:
        return self._service_name

    def set_base_url(self, base_url: str) -> "HttpClient":
        self._base_url = base_url
        return self

    def get_base_url(self) -> str:
        return self._base_url

    def set_headers(self, headers: dict[str, str]) -> "HttpClient":
        """Replace the default headers."""
        self._headers = normalize_headers(headers)
        return self

    def push_header(self, header: dict[str, str]) -> "HttpClient":
        """Merge into the default headers, replacing only the supplied keys."""
        self._headers.update(normalize_headers(header))
        return self

    def get_headers(self) -> dict[str, str]:
        return dict(self._headers)

    def set_options(self, options: dict[str, Any]) -> "HttpClient":
        """Replace the default options."""
        self._options = _copy_options(options)
        return self

    def push_option(self, option: dict[str, Any]) -> "HttpClient":
        """
        Merge into the default options.

        Keys in deep_merge_keys whose old and new values are both mappings
        are merged key by key; every other key is replaced outright.
        """
        for key, value in option.items():
            current = self._options.get(key)
            if key in self.deep_merge_keys and isinstance(current, Mapping) and isinstance(value, Mapping):
                self._options[key] = {**current, **value}
            else:
                self._options[key] = dict(value) if isinstance(value, Mapping) else value
        return self

    def get_options(self) -> dict[str, Any]:
        return _copy_options(self._options)

    # -------------------------------------------------------------------------
    # Convenience verbs
    # -------------------------------------------------------------------------

    def get(self, url: str, headers: Optional[dict[str, str]] = None, options: Optional[dict[str, Any]] = None) -> Any:
        return self.request(HttpMethods.GET, url, None, headers, options).get_decoded_body()

    def post(
        self,
        url: str,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
        options: Optional[dict[str, Any]] = None,
    ) -> Any:
        return self.request(HttpMethods.POST, url, body, headers, options).get_decoded_body()

    def put(
        self,
        url: str,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
        options: Optional[dict[str, Any]] = None,
    ) -> Any:
        return self.request(HttpMethods.PUT, url, body, headers, options).get_decoded_body()

    def patch(
        self,
        url: str,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
        options: Optional[dict[str, Any]] = None,
    ) -> Any:
        return self.request(HttpMethods.PATCH, url, body, headers, options).get_decoded_body()

    def delete(self, url: str, headers: Optional[dict[str, str]] = None, options: Optional[dict[str, Any]] = None) -> Any:
        return self.request(HttpMethods.DELETE, url, None, headers, options).get_decoded_body()

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def request(
        self,
        method: str,
        url: str,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
        options: Optional[dict[str, Any]] = None,
    ) -> HttpResponse:
        """
        Execute one call.

        Args:
            method: HTTP method
            url: Path appended to the base URL
            body: Logical body, encoded by the request body handler
            headers: Per-call headers (replace the defaults)
            options: Per-call options (replace the defaults)

        Returns:
            HttpResponse; transport and compliance failures are attached
            as response.error

        Raises:
            EncodingException: If the body cannot be encoded
            ComplianceException: If a fatal compliance rule failed
        """
        plan = self._plan(method, url, body, headers, options)
        if isinstance(plan, Intercepted):
            return plan.response

        transaction = plan.transaction
        self._last_transaction = transaction

        response = transaction.run().get_response()
        response.set_body_handler(
            _first((options or {}).get(OPTION_RESPONSE_BODY_HANDLER), self.response_body_handler)
        )
        self.quality_assurance.check_compliance(transaction)
        return response

    def _plan(
        self,
        method: str,
        url: str,
        body: Any,
        headers: Optional[dict[str, str]],
        options: Optional[dict[str, Any]],
    ) -> CallPlan:
        resolved = self.get_url(url, options)
        mock = self.mocks.find(method, resolved)
        if mock is not None:
            logger.debug(f"[{self._service_name or '-'}] {method} {resolved} intercepted by mock")
            return Intercepted(mock.get())

        transaction = Transaction(
            self._build_request(method, resolved, body, headers, options),
            self.transport,
            recorder=self.recorder,
        )
        transaction.set_service_name(self._service_name)
        return Execute(transaction)

    def _build_request(
        self,
        method: str,
        url: str,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
        options: Optional[dict[str, Any]] = None,
    ) -> HttpRequest:
        return HttpRequest(
            method=method,
            url=url,
            headers=dict(headers if headers is not None else self._headers),
            options=_copy_options(options if options is not None else self._options),
            body=body,
            body_handler=_first(
                (options or {}).get(OPTION_REQUEST_BODY_HANDLER),
                self._options.get(OPTION_REQUEST_BODY_HANDLER),
                self.request_body_handler,
            ),
        )

    def get_url(self, url: str, options: Optional[dict[str, Any]] = None) -> str:
        """
        Resolve a path against the base URL.

        A per-call baseUrl option is concatenated verbatim; the client's
        own base URL result has trailing slashes trimmed.
        """
        if options and options.get(OPTION_BASE_URL) is not None:
            return options[OPTION_BASE_URL] + url
        return (self._base_url + url).rstrip("/")

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_last_transaction(self) -> Optional[Transaction]:
        return self._last_transaction

    def get_last_response(self) -> Optional[HttpResponse]:
        return self._last_transaction.get_response() if self._last_transaction else None

    def spawn(self) -> "HttpClient":
        """
        Call-scoped child sharing configuration and collaborators but with
        its own last-transaction slot.
        """
        child = copy.copy(self)
        child._headers = dict(self._headers)
        child._options = _copy_options(self._options)
        child._last_transaction = None
        return child
