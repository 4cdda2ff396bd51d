"""Parse strategies for sanitized model output.

Strategies are tried strictly in order and the first one that yields a
record wins:

1. :class:`StrictParse` - standard JSON
2. :class:`LenientParse` - JSON5 after stripping control characters
3. :class:`RegexExtraction` - per-field patterns, always succeeds

Example:
    ```python
    from receipt_scanner.parsing import build_strategies, parse_sanitized

    outcome = parse_sanitized(sanitized_text, build_strategies())
    print(outcome.name, outcome.value)
    ```
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import json5

from receipt_scanner.core.config import ParsingConfig
from receipt_scanner.parsing.chain import Outcome, first_success
from receipt_scanner.parsing.loose import LooseRecord, parse_number
from receipt_scanner.parsing.sanitizer import sanitize

logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")

# "at 3:14" or "<string>:3 Unexpected ... at column 14"
_LINE_COLUMN_PATTERNS = (
    re.compile(r"\bat (\d+):(\d+)"),
    re.compile(r":(\d+)\b.*?\bcolumn (\d+)"),
)


def _quoted_field(name: str) -> re.Pattern[str]:
    return re.compile(r"[\"']" + name + r"[\"']\s*:\s*[\"']([^\"']+)[\"']")


def _numeric_field(name: str) -> re.Pattern[str]:
    return re.compile(r"[\"']" + name + r"[\"']\s*:\s*([\d.]+)")


_VENDOR_NAME = _quoted_field("vendorName")
_TRANSACTION_DATE = _quoted_field("transactionDate")
_TOTAL_AMOUNT = _numeric_field("totalAmount")
_ITEMS_BODY = re.compile(r"[\"']items[\"']\s*:\s*\[(.*?)\]", re.DOTALL)
_ITEM_BOUNDARY = re.compile(r"\}\s*,\s*\{")
_ITEM_NAME = _quoted_field("name")
_ITEM_QUANTITY = _numeric_field("quantity")
_ITEM_PRICE = _numeric_field("price")


@runtime_checkable
class ParseStrategy(Protocol):
    """A single way of turning sanitized text into a :class:`LooseRecord`."""

    name: str

    def __call__(self, text: str) -> Outcome[LooseRecord]:
        """Parse ``text``; report failure through the outcome, never raise."""
        ...


class StrictParse:
    """Standard JSON grammar."""

    name = "strict"

    def __call__(self, text: str) -> Outcome[LooseRecord]:
        try:
            parsed = json.loads(text)
        except (ValueError, RecursionError) as e:
            return Outcome.failure(self.name, f"Standard JSON parsing failed: {e}")
        return _as_record(self.name, parsed)


class LenientParse:
    """JSON5 grammar: unquoted keys, single quotes and trailing commas.

    Control characters are removed first. When the parser reports a
    line/column, a snippet around that position is logged.
    """

    name = "lenient"

    def __init__(self, context_chars: int = 20, log: logging.Logger | None = None) -> None:
        self.context_chars = context_chars
        self._log = log or logger

    def __call__(self, text: str) -> Outcome[LooseRecord]:
        cleaner = _CONTROL_CHARS.sub("", text)
        try:
            parsed = json5.loads(cleaner)
        except Exception as e:
            self._log.error("JSON5 parse error: %s", e)
            self._log_error_context(cleaner, str(e))
            return Outcome.failure(self.name, f"JSON5 parsing failed: {e}")
        return _as_record(self.name, parsed)

    def _log_error_context(self, text: str, message: str) -> None:
        location = error_location(message)
        if location is None:
            return
        position = offset_from_line_column(text, *location)
        start = max(0, position - self.context_chars)
        end = min(len(text), position + self.context_chars)
        self._log.error('Error context: "...%s..." (position %d)', text[start:end], position)


class RegexExtraction:
    """Last resort: pull each field out with its own pattern.

    Always succeeds; fields that are not found are left out of the record
    so the normalizer fills in their defaults.
    """

    name = "regex"

    def __init__(self, log: logging.Logger | None = None, preview_chars: int = 100) -> None:
        self._log = log or logger
        self.preview_chars = preview_chars

    def __call__(self, text: str) -> Outcome[LooseRecord]:
        self._log.warning("Falling back to regex-based extraction")
        data: dict[str, Any] = {}

        vendor = _VENDOR_NAME.search(text)
        if vendor:
            data["vendorName"] = vendor.group(1)
        date = _TRANSACTION_DATE.search(text)
        if date:
            data["transactionDate"] = date.group(1)
        total = _TOTAL_AMOUNT.search(text)
        amount = parse_number(total.group(1)) if total else None
        if amount is not None:
            data["totalAmount"] = amount

        items_body = _ITEMS_BODY.search(text)
        if items_body and items_body.group(1).strip():
            data["items"] = [
                self._parse_item(piece) for piece in _ITEM_BOUNDARY.split(items_body.group(1))
            ]

        return Outcome.success(self.name, LooseRecord(data))

    def _parse_item(self, piece: str) -> dict[str, Any]:
        piece = piece.strip()
        if not piece.startswith("{"):
            piece = "{" + piece
        if not piece.endswith("}"):
            piece = piece + "}"

        sanitized = sanitize(piece, log=self._log, preview_chars=self.preview_chars)
        steps = (StrictParse(), LenientParse(log=self._log), _extract_item_fields)
        outcome = first_success(steps, sanitized, log=self._log)
        if outcome is None or outcome.value is None:
            return {}
        return outcome.value.to_dict()


def _extract_item_fields(text: str) -> Outcome[LooseRecord]:
    data: dict[str, Any] = {}
    name = _ITEM_NAME.search(text)
    if name:
        data["name"] = name.group(1)
    for key, pattern in (("quantity", _ITEM_QUANTITY), ("price", _ITEM_PRICE)):
        match = pattern.search(text)
        number = parse_number(match.group(1)) if match else None
        if number is not None:
            data[key] = number
    return Outcome.success("item_regex", LooseRecord(data))


def _as_record(name: str, parsed: Any) -> Outcome[LooseRecord]:
    record = LooseRecord.from_value(parsed)
    if record is None:
        return Outcome.failure(name, f"Parsed a {type(parsed).__name__}, expected an object")
    return Outcome.success(name, record)


def error_location(message: str) -> tuple[int, int] | None:
    """Line and column (both 1-based) named in a parser error message."""
    for pattern in _LINE_COLUMN_PATTERNS:
        match = pattern.search(message)
        if match:
            return int(match.group(1)), int(match.group(2))
    return None


def offset_from_line_column(text: str, line: int, column: int) -> int:
    """Absolute character offset of a 1-based line/column position."""
    lines = text.split("\n")
    position = sum(len(lines[i]) + 1 for i in range(min(line - 1, len(lines))))
    if line <= len(lines):
        position += column - 1
    return position


def build_strategies(
    config: ParsingConfig | None = None,
    log: logging.Logger | None = None,
) -> list[ParseStrategy]:
    """Ordered strategy list for ``config`` (strict, lenient, regex)."""
    config = config or ParsingConfig()
    strategies: list[ParseStrategy] = [StrictParse()]
    if config.enable_lenient_parse:
        strategies.append(LenientParse(context_chars=config.error_context_chars, log=log))
    if config.enable_regex_fallback:
        strategies.append(RegexExtraction(log=log, preview_chars=config.log_preview_chars))
    return strategies


def parse_sanitized(
    text: str,
    strategies: Sequence[ParseStrategy] | None = None,
    log: logging.Logger | None = None,
) -> Outcome[LooseRecord] | None:
    """Run the strategy chain over sanitized text.

    Returns the winning outcome, or None when every strategy failed (only
    possible when the regex fallback is disabled).
    """
    log = log or logger
    if strategies is None:
        strategies = build_strategies(log=log)

    outcome = first_success(strategies, text, log=log)
    if outcome is None:
        log.warning("All parse strategies failed")
    else:
        log.info("Parsed model response with the %s strategy", outcome.name)
    return outcome
