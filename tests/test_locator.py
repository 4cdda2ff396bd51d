"""Tests for locating the JSON block in model output."""

import logging
from unittest.mock import MagicMock

from receipt_scanner.parsing.locator import locate_candidate


class TestLocateCandidate:
    """Tests for locate_candidate."""

    def test_fenced_block_with_json_tag(self) -> None:
        """Test that a ```json fenced block is returned without the fence."""
        text = 'Here is the data:\n```json\n{"vendorName": "Shop"}\n```\nThanks!'

        assert locate_candidate(text) == '{"vendorName": "Shop"}'

    def test_fenced_block_without_tag(self) -> None:
        """Test that an untagged fenced block is also recognized."""
        text = "```\n{vendorName: 'Shop'}\n```"

        assert locate_candidate(text) == "{vendorName: 'Shop'}"

    def test_fenced_block_wins_over_braces(self) -> None:
        """Test that the fenced content is preferred over brace spans in prose."""
        text = 'Note {not this}\n```json\n{"a": 1}\n```'

        assert locate_candidate(text) == '{"a": 1}'

    def test_brace_span_is_greedy(self) -> None:
        """Test that the span runs from the first { to the last }."""
        text = 'Sure! {"a": {"b": 1}} and {"c": 2} done'

        assert locate_candidate(text) == '{"a": {"b": 1}} and {"c": 2}'

    def test_empty_fence_falls_back_to_braces(self) -> None:
        """Test that an empty fenced block does not count as a candidate."""
        text = '``` ``` then {"a": 1}'

        assert locate_candidate(text) == '{"a": 1}'

    def test_no_structure_returns_none(self) -> None:
        """Test that text without a block gives None rather than an error."""
        assert locate_candidate("I could not read this receipt.") is None
        assert locate_candidate("") is None

    def test_logs_through_injected_logger(self) -> None:
        """Test that diagnostics go to the injected logger."""
        log = MagicMock(spec=logging.Logger)

        locate_candidate("no data here", log=log)

        log.warning.assert_called_once()
