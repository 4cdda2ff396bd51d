"""Receipt record schemas."""

from receipt_scanner.schemas.receipt import (
    DEFAULT_ITEM_NAME,
    DEFAULT_PRICE,
    DEFAULT_QUANTITY,
    DEFAULT_TOTAL,
    DEFAULT_VENDOR_NAME,
    ReceiptItemRecord,
    ReceiptRecord,
    StoredReceipt,
    default_record,
)

__all__ = [
    "ReceiptItemRecord",
    "ReceiptRecord",
    "StoredReceipt",
    "default_record",
    "DEFAULT_VENDOR_NAME",
    "DEFAULT_ITEM_NAME",
    "DEFAULT_QUANTITY",
    "DEFAULT_PRICE",
    "DEFAULT_TOTAL",
]
