"""Typed access to loosely shaped parsed data."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

# Leading number of a string, the way a lenient float parser reads it
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> float | None:
    """Coerce ``value`` to a finite float.

    Numbers are taken as-is; strings are read up to the end of their leading
    number (``"12.50 EUR"`` -> 12.5). Booleans, non-numeric strings and
    non-finite values give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None
    return number if math.isfinite(number) else None


class LooseRecord:
    """A parsed mapping whose fields may be missing, mistyped or extra.

    Every accessor returns None when the field is absent or has the wrong
    type, leaving the choice of default to the caller.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = dict(data)

    @classmethod
    def from_value(cls, value: Any) -> LooseRecord | None:
        """Wrap ``value`` if it is a mapping, otherwise return None."""
        if isinstance(value, Mapping):
            return cls(value)
        return None

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LooseRecord):
            return self._data == other._data
        return NotImplemented

    def __repr__(self) -> str:
        return f"LooseRecord({self._data!r})"

    def get_value(self, key: str) -> Any:
        """Raw value of ``key`` (None when absent)."""
        return self._data.get(key)

    def get_text(self, key: str) -> str | None:
        """Non-empty string value of ``key``."""
        value = self._data.get(key)
        if isinstance(value, str) and value:
            return value
        return None

    def get_number(self, key: str) -> float | None:
        """Finite numeric value of ``key`` (see :func:`parse_number`)."""
        return parse_number(self._data.get(key))

    def get_list(self, key: str) -> list[Any] | None:
        """List value of ``key``."""
        value = self._data.get(key)
        if isinstance(value, list):
            return value
        return None

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)
