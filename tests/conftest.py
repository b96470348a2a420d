"""
Pytest configuration and shared fixtures for servicecall tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_common = importlib.import_module("fixtures.common")

StubTransport = _common.StubTransport
make_result = _common.make_result
make_client = _common.make_client


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def stub_transport():
    """Transport answering 200 with a small JSON body."""
    return StubTransport(make_result())


@pytest.fixture
def mock_registry():
    """Empty, isolated mock registry."""
    from servicecall.mock import MockRegistry
    return MockRegistry()


@pytest.fixture
def client(stub_transport, mock_registry):
    """Client on https://a backed by the stub transport and an isolated registry."""
    return make_client(transport=stub_transport, mocks=mock_registry)


@pytest.fixture(autouse=True)
def _isolate_default_registry():
    """Reset the process default mock registry around every test."""
    from servicecall.mock import MockRegistry, set_default_registry
    set_default_registry(MockRegistry())
    yield
    set_default_registry(MockRegistry())


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that exercise the whole pipeline"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
