"""Result types for receipt extraction."""

from receipt_scanner.results.types import ExtractionResult, ScanResult

__all__ = [
    "ExtractionResult",
    "ScanResult",
]
