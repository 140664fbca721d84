from .receipt_service import (
    ReceiptError,
    ReceiptNotFoundError,
    ReceiptOwnershipError,
    get_or_create_receipt,
    get_receipt,
    get_receipt_for_order,
    list_receipts,
)

__all__ = [
    "ReceiptError",
    "ReceiptNotFoundError",
    "ReceiptOwnershipError",
    "get_or_create_receipt",
    "get_receipt",
    "get_receipt_for_order",
    "list_receipts",
]
