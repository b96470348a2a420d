"""
Body Handlers

Pluggable encode/decode capability per content type.
"""

from .base import BodyHandler
from .form_handler import FormBodyHandler
from .json_handler import JsonBodyHandler
from .raw_handler import RawBodyHandler

__all__ = [
    "BodyHandler",
    "FormBodyHandler",
    "JsonBodyHandler",
    "RawBodyHandler",
]
