"""Example: Basic usage of receipt-scanner."""

import logging
import os
import sys

from dotenv import load_dotenv

from receipt_scanner import ReceiptExtractor, ReceiptScanner, ScanConfig

# Load environment variables
load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def example_parse_model_output() -> None:
    """Demonstrate recovering a receipt from malformed model output."""
    print("=" * 60)
    print("Example 1: Parsing Malformed Model Output")
    print("=" * 60)

    raw = """Sure! Here is what I found:
    ```json
    {vendorName: 'Coffee Shop', transactionDate: '18/05/25', totalAmount: 12.50,
     items: [{name:'Latte', quantity:1, price:4.50}{name:'Muffin', quantity:2, price:4.00},]}
    ```
    """

    result = ReceiptExtractor().extract(raw)

    print(f"Strategy: {result.strategy}")
    print(f"Vendor: {result.record.vendor_name}")
    print(f"Date: {result.record.transaction_date:%Y-%m-%d}")
    print(f"Total: {result.record.total_amount:.2f}")
    for item in result.record.items:
        print(f"  - {item.name} x{item.quantity:g}: {item.price:.2f}")


def example_scan_image(image_path: str) -> None:
    """Demonstrate scanning a receipt image with a vision model."""
    print("\n" + "=" * 60)
    print("Example 2: Scanning a Receipt Image")
    print("=" * 60)

    scanner = ReceiptScanner(
        api_key=os.getenv("OPENAI_API_KEY"),
        model="gpt-4.1",
        cache_dir="cache",
    )
    config = ScanConfig(additional_context="Amounts are in EUR.")

    result = scanner.scan(image_path, user_id="demo-user", config=config)

    print(result.receipt.model_dump_json(by_alias=True, indent=2))
    print(f"\nStrategy: {result.strategy}")
    print(f"Cached: {result.cached}")
    print(f"Tokens used: {result.tokens_used}")


if __name__ == "__main__":
    example_parse_model_output()

    if len(sys.argv) > 1:
        example_scan_image(sys.argv[1])
