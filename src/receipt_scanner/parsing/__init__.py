"""Locating, repairing and parsing the data block in model output."""

from receipt_scanner.parsing.chain import Outcome, first_success
from receipt_scanner.parsing.locator import locate_candidate
from receipt_scanner.parsing.loose import LooseRecord, parse_number
from receipt_scanner.parsing.sanitizer import FALLBACK_JSON, neutralize_nested_quotes, sanitize
from receipt_scanner.parsing.strategies import (
    LenientParse,
    ParseStrategy,
    RegexExtraction,
    StrictParse,
    build_strategies,
    parse_sanitized,
)

__all__ = [
    "Outcome",
    "first_success",
    "locate_candidate",
    "LooseRecord",
    "parse_number",
    "FALLBACK_JSON",
    "sanitize",
    "neutralize_nested_quotes",
    "ParseStrategy",
    "StrictParse",
    "LenientParse",
    "RegexExtraction",
    "build_strategies",
    "parse_sanitized",
]
