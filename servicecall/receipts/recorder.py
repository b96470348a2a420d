"""
Receipt Recorder

Records a receipt for every executed transaction. Receipts can be saved
to disk and loaded back into a MockRegistry for replay.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

from .models import ReceiptTiming, TransactionReceipt

if TYPE_CHECKING:
    from servicecall.http.request import HttpRequest
    from servicecall.http.response import HttpResponse


def generate_receipt_id(method: str, url: str) -> str:
    """
    Generate a receipt ID.

    Format: rc_http_{hash_prefix}_{nonce}
    """
    hash_hex = hashlib.sha256(f"{method}|{url}".encode()).hexdigest()[:12]
    return f"rc_http_{hash_hex}_{uuid.uuid4().hex[:8]}"


class ReceiptRecorder:
    """
    Records receipts for executed transactions.

    Usage:
        recorder = ReceiptRecorder()
        client = HttpClient("https://api.example.com", recorder=recorder)
        client.get("/users")

        recorder.save("calls.json")
        registry = MockRegistry.from_receipts(recorder.get_receipts())
    """

    def __init__(self) -> None:
        self._receipts: list[TransactionReceipt] = []
        self._in_progress: dict[str, TransactionReceipt] = {}

    def start(
        self,
        request: "HttpRequest",
        *,
        service_name: Optional[str] = None,
    ) -> TransactionReceipt:
        """Start recording a transaction."""
        receipt = TransactionReceipt(
            receipt_id=generate_receipt_id(request.method, request.url),
            service_name=service_name,
            method=request.method,
            url=request.url,
            request=request.to_dict(),
            timing=ReceiptTiming(started_at=datetime.now(timezone.utc)),
        )
        self._in_progress[receipt.receipt_id] = receipt
        return receipt

    def complete(
        self,
        receipt: TransactionReceipt,
        response: "HttpResponse",
    ) -> TransactionReceipt:
        """
        Complete a receipt with the response snapshot.

        Args:
            receipt: The receipt returned by start()
            response: The populated response

        Returns:
            The completed receipt
        """
        now = datetime.now(timezone.utc)
        receipt.timing.ended_at = now
        if receipt.timing.started_at:
            delta = now - receipt.timing.started_at
            receipt.timing.duration_ms = delta.total_seconds() * 1000

        receipt.response = response.to_dict()
        if response.error is not None:
            receipt.error = response.error.message

        receipt.compute_hashes()

        self._in_progress.pop(receipt.receipt_id, None)
        self._receipts.append(receipt)
        return receipt

    def discard(self, receipt: TransactionReceipt) -> None:
        """Drop a receipt whose transaction never completed."""
        self._in_progress.pop(receipt.receipt_id, None)

    def get_receipts(self) -> list[TransactionReceipt]:
        """Get all completed receipts."""
        return list(self._receipts)

    def get_in_progress(self) -> list[TransactionReceipt]:
        """Get receipts that haven't been completed yet."""
        return list(self._in_progress.values())

    def clear(self) -> None:
        """Clear all receipts."""
        self._receipts.clear()
        self._in_progress.clear()

    def to_dict_list(self) -> list[dict[str, Any]]:
        """Convert all receipts to JSON-serializable dicts."""
        return [r.model_dump(mode="json", exclude_none=True) for r in self._receipts]

    def save(self, path: str | Path) -> Path:
        """Write completed receipts to a JSON file."""
        path = Path(path)
        path.write_text(json.dumps(self.to_dict_list(), indent=2, ensure_ascii=False))
        return path

    @staticmethod
    def load(path: str | Path) -> list[TransactionReceipt]:
        """Load receipts previously written by save()."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Receipt file not found: {path}")
        data = json.loads(path.read_text())
        return [TransactionReceipt.model_validate(item) for item in data]
