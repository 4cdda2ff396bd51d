"""Canonical receipt records.

Field names are snake_case in Python and camelCase on the wire
(``model_dump(by_alias=True)``), matching the keys the model is asked
to produce.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_VENDOR_NAME = "Unknown Vendor"
DEFAULT_ITEM_NAME = "Unnamed Item"
DEFAULT_QUANTITY = 1.0
DEFAULT_PRICE = 0.0
DEFAULT_TOTAL = 0.0


class ReceiptItemRecord(BaseModel):
    """A single purchased line item."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(default=DEFAULT_ITEM_NAME, description="Item name")
    quantity: float = Field(
        default=DEFAULT_QUANTITY,
        ge=0.0,
        allow_inf_nan=False,
        description="Quantity purchased",
    )
    price: float = Field(
        default=DEFAULT_PRICE,
        ge=0.0,
        allow_inf_nan=False,
        description="Price of the item",
    )


class ReceiptRecord(BaseModel):
    """Fully typed receipt, always well-formed.

    Example:
        ```python
        from receipt_scanner import extract_receipt

        record = extract_receipt(model_output)
        print(record.vendor_name, record.total_amount)
        print(record.model_dump(by_alias=True))
        ```
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    vendor_name: str = Field(
        default=DEFAULT_VENDOR_NAME,
        alias="vendorName",
        description="Name of the vendor/store",
    )
    transaction_date: datetime = Field(
        alias="transactionDate",
        description="Date and time of the transaction",
    )
    total_amount: float = Field(
        default=DEFAULT_TOTAL,
        alias="totalAmount",
        allow_inf_nan=False,
        description="Total amount paid",
    )
    items: list[ReceiptItemRecord] = Field(
        default_factory=list,
        description="Purchased items, in receipt order",
    )

    def to_stored(self, user_id: str, image_url: str | None = None) -> StoredReceipt:
        """Attach the caller identity and image location for persistence."""
        return StoredReceipt(
            vendor_name=self.vendor_name,
            transaction_date=self.transaction_date,
            total_amount=self.total_amount,
            items=list(self.items),
            image_url=image_url,
            user_id=user_id,
        )


class StoredReceipt(ReceiptRecord):
    """Receipt in the shape handed to the persistence layer."""

    image_url: str | None = Field(
        default=None,
        alias="imageUrl",
        description="Relative path of the stored receipt image",
    )
    user_id: str = Field(alias="userId", description="Owner of the receipt")


def default_record(now: datetime | None = None) -> ReceiptRecord:
    """Record used when nothing could be recovered from the model output."""
    return ReceiptRecord(transaction_date=now or datetime.now())
