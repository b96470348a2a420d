"""
Test fixtures package for servicecall tests.

Usage:
    from fixtures import StubTransport, make_result, make_client

    def test_something():
        transport = StubTransport(make_result(status=201))
        client = make_client(transport=transport)
"""

from .common import (
    FakeSession,
    StubTransport,
    make_client,
    make_result,
)

__all__ = [
    "FakeSession",
    "StubTransport",
    "make_client",
    "make_result",
]
