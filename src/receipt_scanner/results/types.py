"""Result types for extraction and scan outputs."""

from __future__ import annotations

from pydantic import BaseModel, Field

from receipt_scanner.schemas.receipt import ReceiptRecord, StoredReceipt


class ExtractionResult(BaseModel):
    """Outcome of running the parsing pipeline on one model response."""

    record: ReceiptRecord = Field(description="The canonical receipt record")
    strategy: str | None = Field(
        default=None,
        description="Parse strategy that produced the data (None when defaulted)",
    )
    candidate_found: bool = Field(
        default=False,
        description="Whether a JSON-like block was located in the response",
    )
    raw_response: str | None = Field(
        default=None,
        description="Raw model response for debugging",
    )

    @property
    def used_default(self) -> bool:
        """True when nothing was recovered and the default record was used."""
        return self.strategy is None


class ScanResult(BaseModel):
    """Result of scanning a receipt image.

    Example:
        ```python
        result = scanner.scan("uploads/receipt.jpg", user_id="user-1")
        print(result.receipt.vendor_name, result.strategy)
        store.create(result.receipt.model_dump(by_alias=True))
        ```
    """

    receipt: StoredReceipt = Field(description="Receipt ready for persistence")
    strategy: str | None = Field(
        default=None,
        description="Parse strategy that produced the data (None when defaulted)",
    )

    # Metadata
    model_used: str | None = Field(
        default=None,
        description="LLM model used for extraction",
    )
    cached: bool = Field(
        default=False,
        description="Whether result was served from cache",
    )
    tokens_used: int | None = Field(
        default=None,
        description="Total tokens used for extraction",
    )
    cost_usd: float | None = Field(
        default=None,
        description="Estimated cost in USD",
    )
    raw_response: str | None = Field(
        default=None,
        description="Raw LLM response for debugging",
    )
