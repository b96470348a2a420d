"""
Receipts

Audit trail of executed transactions, with save/load for replay.
"""

from .models import ReceiptTiming, TransactionReceipt, hash_snapshot
from .recorder import ReceiptRecorder, generate_receipt_id

__all__ = [
    "ReceiptRecorder",
    "ReceiptTiming",
    "TransactionReceipt",
    "generate_receipt_id",
    "hash_snapshot",
]
