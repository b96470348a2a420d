"""
Mock interception for tests and record/replay.
"""

from .registry import (
    MockRegistry,
    MockResponse,
    get_default_registry,
    set_default_registry,
)

__all__ = [
    "MockRegistry",
    "MockResponse",
    "get_default_registry",
    "set_default_registry",
]
