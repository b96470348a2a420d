"""
Transaction Tests

Tests for the execution unit:
1. A successful run populates status, headers, body and timing
2. A transport failure completes with a TransportError attached
3. An encoding failure never reaches the transport
4. run() re-executes and overwrites the response
5. OS-level connection errors are folded into TransportError
"""

import socket

import pytest

from fixtures import StubTransport, make_result

from servicecall.body_handlers import JsonBodyHandler
from servicecall.http import HttpRequest, Transaction, TransactionState
from servicecall.receipts import ReceiptRecorder
from servicecall.schemas.errors import EncodingException, ErrorKinds


def make_request(body=None) -> HttpRequest:
    return HttpRequest(
        "POST" if body is not None else "GET",
        "https://a/p",
        headers={"accept": "application/json"},
        options={"curlSettings": {"timeout": 5}},
        body=body,
        body_handler=JsonBodyHandler(),
    )


class TestTransactionRun:
    """Tests for Transaction.run()."""

    def test_initial_state(self):
        transaction = Transaction(make_request(), StubTransport())
        assert transaction.state == TransactionState.BUILT
        assert not transaction.is_completed
        assert transaction.get_response().status is None

    def test_success_populates_response(self):
        transport = StubTransport(make_result(status=201, body='{"id": 7}', total=0.2))
        transaction = Transaction(make_request({"name": "x"}), transport).run()

        response = transaction.get_response()
        assert transaction.is_completed
        assert response.status == 201
        assert response.body == '{"id": 7}'
        assert response.headers == {"content-type": "application/json"}
        assert response.time.total == pytest.approx(0.2)
        assert response.error is None
        assert response.options == {"curlSettings": {"timeout": 5}}

    def test_encoded_body_handed_to_transport(self):
        transport = StubTransport()
        Transaction(make_request({"name": "x"}), transport).run()
        assert transport.last_body == b'{"name": "x"}'

    def test_no_body_sends_nothing(self):
        transport = StubTransport()
        Transaction(make_request(), transport).run()
        assert transport.last_body is None

    def test_transport_failure_attaches_error(self):
        """Connection refused completes the transaction with a TransportError."""
        transaction = Transaction(make_request(), StubTransport.refusing()).run()
        response = transaction.get_response()

        assert transaction.is_completed
        assert response.status is None
        assert response.error is not None
        assert response.error.kind == ErrorKinds.TRANSPORT_ERROR
        assert response.error.message == "connection refused"
        assert response.time.total >= 0.0
        assert response.time.connect == 0.0

    @pytest.mark.parametrize("error", [
        ConnectionRefusedError("connection refused"),
        TimeoutError("timed out"),
        socket.gaierror(-2, "Name or service not known"),
    ])
    def test_os_level_failure_becomes_transport_error(self, error):
        """Connection, timeout and DNS errors raised by a transport are attached, not raised."""
        transaction = Transaction(make_request(), StubTransport(error=error)).run()
        response = transaction.get_response()

        assert transaction.is_completed
        assert response.status is None
        assert response.error.kind == ErrorKinds.TRANSPORT_ERROR
        assert response.error.details["exception"] == type(error).__name__
        assert response.error.details["url"] == "https://a/p"

    def test_unexpected_failure_is_not_marked_completed(self):
        transaction = Transaction(make_request(), StubTransport(error=RuntimeError("bug")))
        with pytest.raises(RuntimeError):
            transaction.run()
        assert transaction.state == TransactionState.RUNNING
        assert transaction.get_response().error is None

    def test_encoding_failure_does_not_call_transport(self):
        transport = StubTransport()
        transaction = Transaction(make_request({"bad": object()}), transport)
        with pytest.raises(EncodingException):
            transaction.run()
        assert transport.calls == []
        assert transaction.state == TransactionState.BUILT

    def test_rerun_overwrites_response(self):
        transport = StubTransport(make_result(status=200))
        transaction = Transaction(make_request(), transport).run()
        first = transaction.get_response()

        transport.result = make_result(status=503)
        transaction.run()

        assert len(transport.calls) == 2
        assert transaction.get_response().status == 503
        assert first.status == 200

    def test_service_name(self):
        transaction = Transaction(make_request(), StubTransport(), service_name="users")
        assert transaction.get_service_name() == "users"
        assert transaction.set_service_name("billing").get_service_name() == "billing"


class TestTransactionReceipts:
    """Tests for receipt recording during run()."""

    def test_receipt_recorded(self):
        recorder = ReceiptRecorder()
        Transaction(make_request(), StubTransport(), service_name="users", recorder=recorder).run()

        receipts = recorder.get_receipts()
        assert len(receipts) == 1
        assert receipts[0].service_name == "users"
        assert receipts[0].response["status"] == 200
        assert receipts[0].is_successful
        assert recorder.get_in_progress() == []

    def test_connection_refused_completes_receipt(self):
        recorder = ReceiptRecorder()
        Transaction(
            make_request(), StubTransport(error=ConnectionRefusedError("connection refused")), recorder=recorder
        ).run()

        assert recorder.get_in_progress() == []
        receipt = recorder.get_receipts()[0]
        assert receipt.error == "connection refused"
        assert receipt.response["error"]["kind"] == ErrorKinds.TRANSPORT_ERROR

    def test_unexpected_failure_discards_receipt(self):
        recorder = ReceiptRecorder()
        transaction = Transaction(make_request(), StubTransport(error=RuntimeError("bug")), recorder=recorder)
        with pytest.raises(RuntimeError):
            transaction.run()
        assert recorder.get_in_progress() == []
        assert recorder.get_receipts() == []

    def test_failed_call_receipt_carries_error(self):
        recorder = ReceiptRecorder()
        Transaction(make_request(), StubTransport.refusing(), recorder=recorder).run()

        receipt = recorder.get_receipts()[0]
        assert receipt.is_complete
        assert not receipt.is_successful
        assert receipt.error == "connection refused"
