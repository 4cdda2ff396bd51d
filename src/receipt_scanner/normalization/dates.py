"""Resolve receipt date strings to datetimes.

Receipts come from many locales, so the fallback patterns do not agree on
field order: ``D/M/YY`` is day-first while ``M/D/YYYY`` is month-first.
That conflict is kept as-is.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, datetime

from dateutil import parser as dateparser

from receipt_scanner.parsing.chain import Outcome, first_success

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class DatePattern:
    """A receipt date layout and how to build a datetime from its match."""

    def __init__(
        self,
        name: str,
        regex: str,
        build: Callable[[re.Match[str]], datetime],
        log: logging.Logger | None = None,
    ) -> None:
        self.name = name
        self.regex = re.compile(regex)
        self.build = build
        self._log = log or logger

    def __call__(self, text: str) -> Outcome[datetime]:
        match = self.regex.search(text)
        if not match:
            return Outcome.failure(self.name, "no match")
        try:
            return Outcome.success(self.name, self.build(match))
        except (ValueError, OverflowError) as e:
            self._log.error("Error parsing date %s with format %s: %s", text, self.name, e)
            return Outcome.failure(self.name, str(e))

    def __repr__(self) -> str:
        return f"DatePattern({self.name!r})"


def _int_or_zero(value: str | None) -> int:
    return int(value) if value else 0


def _day_month_short_year(m: re.Match[str]) -> datetime:
    return datetime(
        2000 + int(m.group(3)),
        int(m.group(2)),
        int(m.group(1)),
        _int_or_zero(m.group(4)),
        _int_or_zero(m.group(5)),
        _int_or_zero(m.group(6)),
    )


def _month_day_year(m: re.Match[str]) -> datetime:
    return datetime(int(m.group(3)), int(m.group(1)), int(m.group(2)))


def _day_month_year(m: re.Match[str]) -> datetime:
    return datetime(int(m.group(3)), int(m.group(2)), int(m.group(1)))


def receipt_date_patterns(log: logging.Logger | None = None) -> list[DatePattern]:
    """Receipt date layouts in the order they are tried."""
    return [
        DatePattern(
            "D/M/YY H:MM:SS",
            r"(\d{1,2})/(\d{1,2})/(\d{2})(?!\d)(?:\s+(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?)?",
            _day_month_short_year,
            log,
        ),
        DatePattern("M/D/YYYY", r"(\d{1,2})/(\d{1,2})/(\d{4})", _month_day_year, log),
        DatePattern("D-M-YYYY", r"(\d{1,2})-(\d{1,2})-(\d{4})", _day_month_year, log),
    ]


def _general_parser(now: datetime) -> Callable[[str], Outcome[datetime]]:
    # Missing parts (year, day, time) come from midnight of the current day
    default = now.replace(hour=0, minute=0, second=0, microsecond=0)

    def parse(text: str) -> Outcome[datetime]:
        try:
            return Outcome.success("general", dateparser.parse(text, default=default))
        except (ValueError, OverflowError) as e:
            return Outcome.failure("general", str(e))

    return parse


def resolve_date(
    value: str | date | datetime | None,
    log: logging.Logger | None = None,
    clock: Clock | None = None,
) -> datetime:
    """Turn a date-like value into a datetime, falling back to now.

    Resolution order:
    1. missing value -> now
    2. datetime -> unchanged; date -> midnight of that day
    3. general-purpose parsing (``dateutil``), missing parts taken from
       the current day
    4. receipt layouts: ``D/M/YY[ H:MM[:SS]]`` (year 20YY), ``M/D/YYYY``,
       ``D-M-YYYY``; a layout whose numbers are out of range is skipped
    5. now

    Args:
        value: The raw date value from the parsed record
        log: Logger for diagnostics (defaults to the module logger)
        clock: Source of "now" (defaults to ``datetime.now``)

    Returns:
        A valid datetime, never None
    """
    log = log or logger
    clock = clock or datetime.now

    if value is None or value == "":
        return clock()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        log.warning("Unsupported date value %r, using current date instead", value)
        return clock()

    now = clock()
    steps = [_general_parser(now), *receipt_date_patterns(log)]
    outcome = first_success(steps, value.strip(), log=log)
    if outcome is not None and outcome.value is not None:
        log.debug("Resolved date %r with %s", value, outcome.name)
        return outcome.value

    log.warning("Could not parse date: %s, using current date instead", value)
    return now
