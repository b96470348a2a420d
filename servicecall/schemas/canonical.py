"""
Canonical JSON

Deterministic serialization of request/response snapshots, used for the
hashes stored in transaction receipts. Two snapshots that carry the same
data always serialize to the same string.

Rules:
- keys sorted, no whitespace between tokens
- None-valued mapping entries dropped
- datetimes as UTC ISO-8601 with a Z suffix
- bytes as lowercase hex, enums by value, pydantic models by their JSON dump
- NaN and Infinity rejected
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import EncodingException

SEPARATORS = (",", ":")


def utc_isoformat(dt: datetime) -> str:
    """Render a datetime in UTC with a Z suffix; naive values are taken as UTC."""
    dt = dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="microseconds" if dt.microsecond else "seconds").replace("+00:00", "Z")


def _prune(value: Any, path: str) -> Any:
    """Drop None entries from mappings and reject non-finite floats."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, dict):
        return {str(k): _prune(v, f"{path}.{k}") for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_prune(v, f"{path}[{i}]") for i, v in enumerate(value)]
    if isinstance(value, float) and not math.isfinite(value):
        raise EncodingException(
            message=f"Non-finite float at {path or '$'}",
            details={"path": path or "$", "value": str(value)},
        )
    return value


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return utc_isoformat(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return str(value)


def dumps_canonical(obj: Any) -> str:
    """
    Serialize a snapshot to canonical JSON.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1, "c": None})
        '{"a":1,"b":2}'

    Raises:
        EncodingException: If the snapshot holds NaN or Infinity
    """
    return json.dumps(
        _prune(obj, ""),
        default=_default,
        sort_keys=True,
        separators=SEPARATORS,
        ensure_ascii=False,
        allow_nan=False,
    )


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """True when both snapshots serialize identically; unserializable ones never match."""
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except EncodingException:
        return False
