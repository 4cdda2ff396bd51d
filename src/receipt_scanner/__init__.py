"""
receipt-scanner: Receipt records from vision LLM output, even when the output is malformed.
"""

from seeds_clients.core.base_client import BaseClient
from seeds_clients.core.types import CumulativeTracking

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
from receipt_scanner.normalization import normalize_record, resolve_date
from receipt_scanner.parsing import (
    LooseRecord,
    build_strategies,
    locate_candidate,
    parse_sanitized,
    sanitize,
)
from receipt_scanner.prompts.builder import ReceiptPromptBuilder
from receipt_scanner.results.types import ExtractionResult, ScanResult
from receipt_scanner.schemas import (
    ReceiptItemRecord,
    ReceiptRecord,
    StoredReceipt,
    default_record,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "ReceiptScanner",
    "ReceiptExtractor",
    "extract_receipt",
    "ReceiptScannerError",
    "ConfigurationError",
    "ScanError",
    "ImageError",
    "LLMError",
    "BaseClient",  # For type hints when injecting clients
    # Config
    "ParsingConfig",
    "ScanConfig",
    # Pipeline stages
    "locate_candidate",
    "sanitize",
    "build_strategies",
    "parse_sanitized",
    "LooseRecord",
    "normalize_record",
    "resolve_date",
    # Prompts
    "ReceiptPromptBuilder",
    # Schemas
    "ReceiptRecord",
    "ReceiptItemRecord",
    "StoredReceipt",
    "default_record",
    # Results
    "ExtractionResult",
    "ScanResult",
    # Tracking
    "CumulativeTracking",
]
