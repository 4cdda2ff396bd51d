"""Prompt builder for receipt image extraction."""

import json
from typing import Any

from pydantic import BaseModel

from receipt_scanner.schemas.receipt import ReceiptItemRecord, ReceiptRecord


class ReceiptPromptBuilder:
    """Builds the extraction prompt sent alongside a receipt image."""

    DEFAULT_INSTRUCTION = (
        "Extract the following information from this receipt image: vendor name, "
        "transaction date, total amount, and individual items with their prices. "
        "Format the output as JSON with the keys: vendorName, transactionDate, "
        "totalAmount, items (where items is an array of objects with name, quantity, "
        "and price). IMPORTANT: Ensure your JSON is valid and follows the exact "
        "format specified."
    )

    EXAMPLE_PAYLOAD: dict[str, Any] = {
        "vendorName": "name",
        "transactionDate": "18/05/25",
        "totalAmount": 16.05,
        "items": [
            {
                "name": "Items",
                "quantity": 1,
                "price": 0.88,
            },
        ],
    }

    def __init__(
        self,
        include_field_descriptions: bool = True,
        example: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the prompt builder.

        Args:
            include_field_descriptions: Whether to list the expected keys with descriptions
            example: Example payload shown to the model (defaults to EXAMPLE_PAYLOAD)
        """
        self.include_field_descriptions = include_field_descriptions
        self.example = example if example is not None else self.EXAMPLE_PAYLOAD

    def build_prompt(
        self,
        custom_prompt: str | None = None,
        additional_context: str | None = None,
    ) -> str:
        """Build the text part of the extraction request.

        Args:
            custom_prompt: Optional instruction to use instead of the default
            additional_context: Optional extra text for the model

        Returns:
            The prompt string
        """
        parts: list[str] = [custom_prompt or self.DEFAULT_INSTRUCTION]

        if self.include_field_descriptions:
            parts.append(f"## Fields\n\n{self.describe_fields()}")

        parts.append(f"## Example\n\nthis is the example json {self.format_example()}")

        if additional_context:
            parts.append(f"## Additional Context\n\n{additional_context}")

        return "\n\n".join(parts)

    def describe_fields(self) -> str:
        """List the wire keys of a receipt and its items with descriptions."""
        lines = _describe_model(ReceiptRecord)
        lines.extend(f"  {line}" for line in _describe_model(ReceiptItemRecord))
        return "\n".join(lines)

    def format_example(self) -> str:
        return json.dumps(self.example)


def _describe_model(model: type[BaseModel]) -> list[str]:
    lines: list[str] = []
    for name, field_info in model.model_fields.items():
        key = field_info.alias or name
        description = field_info.description or ""
        lines.append(f"- {key}: {description}".rstrip(": "))
    return lines
