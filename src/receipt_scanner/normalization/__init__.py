"""Normalization of parsed receipt data."""

from receipt_scanner.normalization.dates import DatePattern, receipt_date_patterns, resolve_date
from receipt_scanner.normalization.record import normalize_item, normalize_record

__all__ = [
    "DatePattern",
    "receipt_date_patterns",
    "resolve_date",
    "normalize_item",
    "normalize_record",
]
