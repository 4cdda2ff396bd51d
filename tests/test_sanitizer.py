"""Tests for the heuristic JSON repair."""

import json
import logging
from unittest.mock import MagicMock

import pytest

from receipt_scanner.parsing import sanitizer
from receipt_scanner.parsing.sanitizer import (
    FALLBACK_JSON,
    neutralize_nested_quotes,
    sanitize,
)

VALID_RECEIPT = (
    '{"vendorName": "Coffee Shop", "transactionDate": "2025-05-18T10:30:00", '
    '"totalAmount": 12.5, "items": [{"name": "Latte", "quantity": 1, "price": 4.5}, '
    '{"name": "Muffin", "quantity": 2, "price": 4.0}]}'
)


class TestSanitizeWellFormedInput:
    """Sanitizing valid JSON must keep its meaning."""

    def test_valid_json_keeps_logical_value(self) -> None:
        """Test that valid receipt JSON parses to the same value after sanitizing."""
        assert json.loads(sanitize(VALID_RECEIPT)) == json.loads(VALID_RECEIPT)

    def test_pretty_printed_json_keeps_logical_value(self) -> None:
        """Test that indented multi-line JSON survives line-break collapsing."""
        pretty = json.dumps(json.loads(VALID_RECEIPT), indent=2)

        assert json.loads(sanitize(pretty)) == json.loads(VALID_RECEIPT)

    def test_colons_inside_strings_are_left_alone(self) -> None:
        """Test that times and colons inside values are not read as keys."""
        text = '{"vendorName": "Shop: Main St", "transactionDate": "18/05/25 10:30:00"}'

        assert json.loads(sanitize(text)) == json.loads(text)

    def test_json_literals_are_not_quoted(self) -> None:
        """Test that true/false/null stay literals."""
        text = '{"paid": true, "refund": false, "note": null}'

        assert json.loads(sanitize(text)) == {"paid": True, "refund": False, "note": None}


class TestSanitizeRepairs:
    """Tests for the individual repair steps."""

    def test_single_quotes_and_trailing_comma(self) -> None:
        """Test recovery of single-quoted keys/values with a trailing comma."""
        text = "{'vendorName': 'Store', 'totalAmount': 12.50,}"

        assert json.loads(sanitize(text)) == {"vendorName": "Store", "totalAmount": 12.5}

    def test_bare_keys_and_values(self) -> None:
        """Test that unquoted keys and word values are double-quoted."""
        text = "{vendorName: Coffee Shop, totalAmount: 4}"

        assert json.loads(sanitize(text)) == {"vendorName": "Coffee Shop", "totalAmount": 4}

    def test_missing_commas_between_objects(self) -> None:
        """Test that }{ gets a comma and trailing commas are dropped."""
        text = '{"items": [{"name": "A"}{"name": "B"},], "totalAmount": 3,}'

        assert json.loads(sanitize(text)) == {
            "items": [{"name": "A"}, {"name": "B"}],
            "totalAmount": 3,
        }

    def test_missing_comma_after_array(self) -> None:
        """Test that ]" gets a comma."""
        text = '{"items": [] "totalAmount": 3}'

        assert json.loads(sanitize(text)) == {"items": [], "totalAmount": 3}

    def test_envelope_is_added(self) -> None:
        """Test that missing outer braces are added."""
        assert json.loads(sanitize('"vendorName": "X"')) == {"vendorName": "X"}

    def test_stray_backslashes_are_removed(self) -> None:
        """Test that backslashes outside valid escapes are dropped."""
        text = r'{"vendorName": "A\_B"}'

        assert json.loads(sanitize(text)) == {"vendorName": "A_B"}

    def test_valid_escapes_are_kept(self) -> None:
        """Test that valid escape sequences survive the backslash removal."""
        text = r'{"vendorName": "Line\nBreak", "path": "a\/b"}'

        assert json.loads(sanitize(text)) == {"vendorName": "Line\nBreak", "path": "a/b"}

    def test_newline_inside_string_becomes_space(self) -> None:
        """Test that raw newlines are collapsed into spaces."""
        assert json.loads(sanitize('{"vendorName": "Coffee\nShop"}')) == {
            "vendorName": "Coffee Shop"
        }

    def test_soft_break_between_quotes_is_joined(self) -> None:
        """Test that a quote-newline-quote soft break joins the string."""
        text = '{"vendorName": "Coffee"\n"Shop", "totalAmount": 1}'

        assert json.loads(sanitize(text)) == {"vendorName": "Coffee Shop", "totalAmount": 1}

    def test_nested_quote_in_vendor_name(self) -> None:
        """Test that an unescaped inner quote does not end the string."""
        text = '{"vendorName": "Joe"s Diner", "totalAmount": 5}'

        assert json.loads(sanitize(text)) == {"vendorName": "Joe s Diner", "totalAmount": 5}

    def test_missing_comma_before_next_key(self) -> None:
        """Test that a value directly followed by the next key gets a comma."""
        text = '{"vendorName": "Corner Shop" "totalAmount": 12.5}'

        assert json.loads(sanitize(text)) == {"vendorName": "Corner Shop", "totalAmount": 12.5}

    def test_adjacent_strings_in_array_are_merged(self) -> None:
        """Test that two strings get a comma only when the second is a key."""
        text = '{"items": ["A" "B"]}'

        assert sanitize(text) == '{"items": ["A  B"]}'

    def test_internal_failure_returns_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an internal error yields the fixed fallback JSON."""

        def boom(text: str) -> str:
            raise RuntimeError("boom")

        monkeypatch.setattr(sanitizer, "_quote_keys", boom)
        log = MagicMock(spec=logging.Logger)

        assert sanitize("{a: 1}", log=log) == FALLBACK_JSON
        assert json.loads(FALLBACK_JSON)["vendorName"] == "Unknown Vendor"
        log.error.assert_called_once()


class TestNeutralizeNestedQuotes:
    """Tests for the quote automaton."""

    def test_inner_double_quotes_become_spaces(self) -> None:
        """Test quotes that do not close the string are blanked."""
        assert neutralize_nested_quotes('{"a": "The "Best" Cafe"}') == '{"a": "The  Best  Cafe"}'

    def test_apostrophe_inside_string_becomes_space(self) -> None:
        """Test that single quotes inside double-quoted strings are blanked."""
        assert neutralize_nested_quotes('{"a": "Joe\'s"}') == '{"a": "Joe s"}'

    def test_escaped_quote_is_kept(self) -> None:
        """Test that an escaped quote is copied unchanged."""
        text = r'{"a": "say \"hi\""}'

        assert neutralize_nested_quotes(text) == text

    def test_apostrophe_outside_string_is_kept(self) -> None:
        """Test that quotes outside strings are not touched."""
        assert neutralize_nested_quotes("{'a': 1}") == "{'a': 1}"

    def test_blank_space_before_terminator_closes_string(self) -> None:
        """Test that whitespace between a quote and its terminator is skipped."""
        text = '{"a": "x"  \n ,"b": "y"\t}'

        assert neutralize_nested_quotes(text) == text

    def test_large_input_is_unchanged(self) -> None:
        """Test that a long valid document passes through the automaton as-is."""
        text = json.dumps({"items": [{"name": f"Item {i}", "price": i} for i in range(20000)]})

        assert neutralize_nested_quotes(text) == text
