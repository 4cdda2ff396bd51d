"""Core scanning and extraction functionality."""

from receipt_scanner.core.config import ParsingConfig, ScanConfig
from receipt_scanner.core.exceptions import (
    ConfigurationError,
    ImageError,
    LLMError,
    ReceiptScannerError,
    ScanError,
)
from receipt_scanner.core.pipeline import ReceiptExtractor, extract_receipt
from receipt_scanner.core.scanner import ReceiptScanner

__all__ = [
    "ReceiptExtractor",
    "ReceiptScanner",
    "extract_receipt",
    "ParsingConfig",
    "ScanConfig",
    "ReceiptScannerError",
    "ConfigurationError",
    "ScanError",
    "ImageError",
    "LLMError",
]
