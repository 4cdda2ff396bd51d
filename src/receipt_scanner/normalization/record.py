"""Coerce loosely parsed data into a canonical :class:`ReceiptRecord`."""

from __future__ import annotations

import logging
from typing import Any

from receipt_scanner.normalization.dates import Clock, resolve_date
from receipt_scanner.parsing.loose import LooseRecord
from receipt_scanner.schemas.receipt import (
    DEFAULT_ITEM_NAME,
    DEFAULT_PRICE,
    DEFAULT_QUANTITY,
    DEFAULT_TOTAL,
    DEFAULT_VENDOR_NAME,
    ReceiptItemRecord,
    ReceiptRecord,
    default_record,
)

logger = logging.getLogger(__name__)


def _non_negative(value: float | None, default: float) -> float:
    if value is None or value < 0:
        return default
    return value


def normalize_item(entry: Any) -> ReceiptItemRecord:
    """Coerce one entry of the ``items`` list.

    Entries that are not objects become a default item.
    """
    item = LooseRecord.from_value(entry)
    if item is None:
        return ReceiptItemRecord()
    return ReceiptItemRecord(
        name=item.get_text("name") or DEFAULT_ITEM_NAME,
        quantity=_non_negative(item.get_number("quantity"), DEFAULT_QUANTITY),
        price=_non_negative(item.get_number("price"), DEFAULT_PRICE),
    )


def normalize_record(
    loose: LooseRecord | None,
    log: logging.Logger | None = None,
    clock: Clock | None = None,
) -> ReceiptRecord:
    """Build the canonical record, filling a default for every bad field.

    Args:
        loose: Parsed data, or None when nothing could be parsed
        log: Logger for diagnostics (defaults to the module logger)
        clock: Source of "now" for missing or unreadable dates

    Returns:
        A fully populated ReceiptRecord
    """
    log = log or logger
    if loose is None:
        log.warning("No parsed data, using the default receipt")
        return default_record(clock() if clock else None)

    total = loose.get_number("totalAmount")
    items = loose.get_list("items") or []

    return ReceiptRecord(
        vendor_name=loose.get_text("vendorName") or DEFAULT_VENDOR_NAME,
        transaction_date=resolve_date(loose.get_value("transactionDate"), log=log, clock=clock),
        total_amount=DEFAULT_TOTAL if total is None else total,
        items=[normalize_item(entry) for entry in items],
    )
