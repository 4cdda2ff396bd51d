"""Model output to receipt record pipeline."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from receipt_scanner.core.config import ParsingConfig
from receipt_scanner.normalization.dates import Clock
from receipt_scanner.normalization.record import normalize_record
from receipt_scanner.parsing.locator import locate_candidate
from receipt_scanner.parsing.sanitizer import sanitize
from receipt_scanner.parsing.strategies import (
    ParseStrategy,
    build_strategies,
    parse_sanitized,
)
from receipt_scanner.results.types import ExtractionResult
from receipt_scanner.schemas.receipt import ReceiptRecord, default_record

logger = logging.getLogger(__name__)


class ReceiptExtractor:
    """Turns raw model output into a :class:`ReceiptRecord`, never raising.

    The pipeline locates the JSON-like block, repairs it, parses it with the
    configured strategies (strict, lenient, regex) and normalizes the result.
    It holds no per-call state, so one instance can be shared across threads.

    Example:
        ```python
        from receipt_scanner import ReceiptExtractor

        extractor = ReceiptExtractor()
        result = extractor.extract(model_output)
        print(result.record.vendor_name, result.strategy)
        ```
    """

    def __init__(
        self,
        config: ParsingConfig | None = None,
        log: logging.Logger | None = None,
        strategies: Sequence[ParseStrategy] | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            config: Parsing configuration.
            log: Logger receiving diagnostics. Defaults to this module's logger.
            strategies: Parse strategies in the order they are tried. Defaults to
                the strategies enabled in ``config``.
            clock: Source of "now" for defaulted dates. Defaults to ``datetime.now``.
        """
        self.config = config or ParsingConfig()
        self._log = log or logger
        self.strategies = list(
            strategies if strategies is not None else build_strategies(self.config, self._log)
        )
        self._clock = clock

    def extract(self, raw_response: str) -> ExtractionResult:
        """Run the full pipeline on one model response.

        Args:
            raw_response: Text content returned by the model.

        Returns:
            ExtractionResult with the record and how it was obtained.
        """
        try:
            return self._extract(raw_response)
        except Exception as e:
            self._log.error("Failed to extract JSON: %s", e)
            return ExtractionResult(
                record=self._default(),
                raw_response=raw_response,
            )

    def extract_many(
        self,
        raw_responses: Iterable[str],
        max_workers: int | None = None,
    ) -> list[ExtractionResult]:
        """Extract several responses in parallel, keeping input order."""
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.extract, raw_responses))

    def _extract(self, raw_response: str) -> ExtractionResult:
        candidate = locate_candidate(raw_response or "", log=self._log)
        if candidate is None:
            return ExtractionResult(record=self._default(), raw_response=raw_response)

        sanitized = sanitize(
            candidate,
            log=self._log,
            preview_chars=self.config.log_preview_chars,
        )
        outcome = parse_sanitized(sanitized, self.strategies, log=self._log)
        if outcome is None:
            return ExtractionResult(
                record=self._default(),
                candidate_found=True,
                raw_response=raw_response,
            )

        record = normalize_record(outcome.value, log=self._log, clock=self._clock)
        return ExtractionResult(
            record=record,
            strategy=outcome.name,
            candidate_found=True,
            raw_response=raw_response,
        )

    def _default(self) -> ReceiptRecord:
        return default_record(self._clock() if self._clock else None)


def extract_receipt(
    raw_response: str,
    config: ParsingConfig | None = None,
    log: logging.Logger | None = None,
) -> ReceiptRecord:
    """Convenience wrapper returning only the record for ``raw_response``."""
    return ReceiptExtractor(config=config, log=log).extract(raw_response).record
