"""
Receipt Models

Audit records of executed transactions. A receipt captures the request
and response snapshots so a call can be inspected or replayed later.

Key Design Principles:
1. request_hash and response_hash are computed over canonical JSON
2. Timestamps live in the timing block and are excluded from hashes
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from servicecall.schemas.canonical import dumps_canonical


def hash_snapshot(obj: Any) -> str:
    """SHA-256 of the canonical JSON of a snapshot, 0x-prefixed."""
    digest = hashlib.sha256(dumps_canonical(obj).encode("utf-8")).digest()
    return "0x" + digest.hex()


class ReceiptTiming(BaseModel):
    """
    Wall-clock timing of a receipt.

    Excluded from hashing.
    """

    model_config = ConfigDict(extra="forbid")

    started_at: Optional[datetime] = Field(
        default=None,
        description="When the transaction started",
    )
    ended_at: Optional[datetime] = Field(
        default=None,
        description="When the transaction completed",
    )
    duration_ms: Optional[float] = Field(
        default=None,
        description="Duration in milliseconds",
    )


class TransactionReceipt(BaseModel):
    """
    Receipt for one executed transaction.

    Captures service name, method, URL, the request snapshot and the
    response snapshot produced by HttpResponse.to_dict().
    """

    model_config = ConfigDict(extra="forbid")

    receipt_id: str = Field(
        ...,
        description="Unique identifier for this receipt",
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Logical service the call was attributed to",
    )
    method: str = Field(
        ...,
        description="HTTP method (GET, POST, etc.)",
    )
    url: str = Field(
        ...,
        description="Resolved request URL",
    )
    request: dict[str, Any] = Field(
        ...,
        description="Request snapshot",
    )
    response: dict[str, Any] = Field(
        default_factory=dict,
        description="Response snapshot",
    )
    request_hash: Optional[str] = Field(
        default=None,
        description="Hash of canonical request (0x-prefixed)",
    )
    response_hash: Optional[str] = Field(
        default=None,
        description="Hash of canonical response (0x-prefixed)",
    )
    timing: ReceiptTiming = Field(
        default_factory=ReceiptTiming,
        description="Timing metadata (non-committed)",
    )
    error: Optional[str] = Field(
        default=None,
        description="Error message if the transaction failed",
    )

    def compute_hashes(self) -> "TransactionReceipt":
        """Compute request and response hashes if not already set."""
        if self.request_hash is None:
            self.request_hash = hash_snapshot(self.request)
        if self.response_hash is None and self.response:
            self.response_hash = hash_snapshot(self.response)
        return self

    @property
    def is_complete(self) -> bool:
        return self.timing.ended_at is not None

    @property
    def is_successful(self) -> bool:
        """Check if the transaction completed without an error."""
        return self.is_complete and self.error is None
