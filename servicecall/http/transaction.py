"""
Transaction

Executes one HttpRequest through a Transport and populates one HttpResponse.

Lifecycle: built -> running -> completed. A transport failure, including a
connection-level OSError, still completes the transaction with the error
attached to the response. Any other exception escapes and leaves the state
at "running"; its receipt is discarded.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Optional, TYPE_CHECKING

from servicecall.schemas.errors import TransportException

from .request import HttpRequest
from .response import HttpResponse, HttpResponseTime
from .transport import Transport, TransportResult

if TYPE_CHECKING:
    from servicecall.receipts import ReceiptRecorder


logger = logging.getLogger(__name__)


class TransactionState(str, Enum):
    BUILT = "built"
    RUNNING = "running"
    COMPLETED = "completed"


class Transaction:
    """
    One (request, response, service name) execution unit.

    run() is not idempotent: calling it again re-executes the transport
    call and overwrites the response state.
    """

    def __init__(
        self,
        request: HttpRequest,
        transport: Transport,
        *,
        service_name: Optional[str] = None,
        recorder: Optional["ReceiptRecorder"] = None,
    ) -> None:
        self.request = request
        self.transport = transport
        self.service_name = service_name
        self.recorder = recorder
        self.response = HttpResponse(
            method=request.method,
            url=request.url,
            options=dict(request.options),
        )
        self.state = TransactionState.BUILT

    def set_service_name(self, service_name: Optional[str]) -> "Transaction":
        self.service_name = service_name
        return self

    def get_service_name(self) -> Optional[str]:
        return self.service_name

    def get_request(self) -> HttpRequest:
        return self.request

    def get_response(self) -> HttpResponse:
        return self.response

    @property
    def is_completed(self) -> bool:
        return self.state == TransactionState.COMPLETED

    def _send(self, body: Optional[bytes]) -> TransportResult:
        """Call the transport, folding OS-level connection failures into TransportException."""
        try:
            return self.transport.send(self.request, body)
        except OSError as e:
            raise TransportException(
                message=str(e) or type(e).__name__,
                details={
                    "exception": type(e).__name__,
                    "method": self.request.method,
                    "url": self.request.url,
                },
            ) from e

    def run(self) -> "Transaction":
        """
        Execute the request and populate the response.

        Returns:
            self, for chaining

        Raises:
            EncodingException: If the request body cannot be encoded.
                The transport is not called and the state stays "built".
        """
        body = self.request.encode_body()

        self.state = TransactionState.RUNNING
        self.response = HttpResponse(
            method=self.request.method,
            url=self.request.url,
            options=dict(self.request.options),
        )
        receipt = self.recorder.start(self.request, service_name=self.service_name) if self.recorder else None

        logger.debug(f"[{self.service_name or '-'}] {self.request.method} {self.request.url}")
        started = time.perf_counter()
        try:
            result = self._send(body)
        except TransportException as e:
            elapsed = time.perf_counter() - started
            self.response.time = HttpResponseTime(total=elapsed)
            self.response.set_error(e.to_error_model())
            self.state = TransactionState.COMPLETED
            logger.warning(
                f"[{self.service_name or '-'}] {self.request.method} {self.request.url} "
                f"transport failure after {elapsed:.3f}s: {e.message}"
            )
        else:
            self.response.status = result.status
            self.response.headers = dict(result.headers)
            self.response.body = result.body
            self.response.time = result.time
            self.state = TransactionState.COMPLETED
            logger.info(
                f"[{self.service_name or '-'}] {self.request.method} {self.request.url} "
                f"-> {result.status} ({result.time.total:.3f}s)"
            )
        finally:
            if receipt is not None and self.recorder is not None:
                if self.is_completed:
                    self.recorder.complete(receipt, self.response)
                else:
                    self.recorder.discard(receipt)

        return self
