"""Tests for coercing parsed data into canonical records."""

import math
from datetime import datetime, timedelta

import pytest

from receipt_scanner.normalization.record import normalize_item, normalize_record
from receipt_scanner.parsing.loose import LooseRecord, parse_number
from receipt_scanner.schemas.receipt import ReceiptItemRecord

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5)


def fixed_clock() -> datetime:
    return FIXED_NOW


class TestParseNumber:
    """Tests for numeric coercion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (7, 7.0),
            (4.5, 4.5),
            ("12.50", 12.5),
            ("12.50 EUR", 12.5),
            ("  -3.2x", -3.2),
            (".5", 0.5),
            ("1e3", 1000.0),
        ],
    )
    def test_numbers(self, value: object, expected: float) -> None:
        """Test values that coerce to a number."""
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [None, True, "abc", "", [], {}, math.inf, math.nan])
    def test_non_numbers(self, value: object) -> None:
        """Test values that do not coerce."""
        assert parse_number(value) is None


class TestLooseRecord:
    """Tests for typed access to parsed data."""

    def test_from_value_requires_mapping(self) -> None:
        """Test that only mappings are wrapped."""
        assert LooseRecord.from_value({"a": 1}) == LooseRecord({"a": 1})
        assert LooseRecord.from_value([1]) is None
        assert LooseRecord.from_value("x") is None

    def test_accessors_report_absent_or_wrong_type(self) -> None:
        """Test that accessors return None instead of coercing wrong types."""
        record = LooseRecord({"name": "", "count": "3", "items": "x", "tag": 5})

        assert record.get_text("name") is None
        assert record.get_text("tag") is None
        assert record.get_text("missing") is None
        assert record.get_number("count") == 3.0
        assert record.get_list("items") is None
        assert record.get_value("tag") == 5
        assert "tag" in record


class TestNormalizeItem:
    """Tests for item coercion."""

    def test_missing_fields_take_defaults(self) -> None:
        """Test the documented item defaults."""
        assert normalize_item({"price": 2}) == ReceiptItemRecord(
            name="Unnamed Item", quantity=1, price=2
        )
        assert normalize_item({"name": "Tea"}) == ReceiptItemRecord(
            name="Tea", quantity=1, price=0
        )
        assert normalize_item({"name": "Tea", "price": 1}).quantity == 1

    def test_string_numbers_are_coerced(self) -> None:
        """Test numeric strings for quantity and price."""
        item = normalize_item({"name": "Tea", "quantity": "2", "price": "3.25"})

        assert item.quantity == 2.0
        assert item.price == 3.25

    def test_negative_and_non_finite_values_take_defaults(self) -> None:
        """Test that invalid numbers do not break the item invariant."""
        item = normalize_item({"quantity": -1, "price": math.nan})

        assert item.quantity == 1.0
        assert item.price == 0.0

    def test_zero_quantity_is_kept(self) -> None:
        """Test that an explicit zero quantity is a value, not a missing field."""
        item = normalize_item({"name": "Bag", "quantity": 0, "price": 0.1})

        assert item.quantity == 0.0
        assert item.price == 0.1

    def test_non_object_entry(self) -> None:
        """Test that a non-object entry becomes a default item."""
        assert normalize_item("Latte") == ReceiptItemRecord()


class TestNormalizeRecord:
    """Tests for normalize_record."""

    def test_none_gives_default_record(self) -> None:
        """Test the default record when nothing was parsed."""
        record = normalize_record(None, clock=fixed_clock)

        assert record.vendor_name == "Unknown Vendor"
        assert record.transaction_date == FIXED_NOW
        assert record.total_amount == 0
        assert record.items == []

    def test_full_record(self) -> None:
        """Test a well-formed parsed record."""
        loose = LooseRecord(
            {
                "vendorName": "Coffee Shop",
                "transactionDate": "18/05/25",
                "totalAmount": 12.5,
                "items": [{"name": "Latte", "quantity": 1, "price": 4.5}],
                "extra": "ignored",
            }
        )

        record = normalize_record(loose)

        assert record.vendor_name == "Coffee Shop"
        assert record.transaction_date == datetime(2025, 5, 18)
        assert record.total_amount == 12.5
        assert record.items == [ReceiptItemRecord(name="Latte", quantity=1, price=4.5)]

    def test_wrong_types_take_defaults(self) -> None:
        """Test that every badly typed field falls back to its default."""
        loose = LooseRecord(
            {"vendorName": 42, "totalAmount": "n/a", "items": {"name": "x"}}
        )

        record = normalize_record(loose, clock=fixed_clock)

        assert record.vendor_name == "Unknown Vendor"
        assert record.total_amount == 0
        assert record.items == []
        assert record.transaction_date == FIXED_NOW

    def test_total_from_string(self) -> None:
        """Test that a string total is read by its leading number."""
        record = normalize_record(LooseRecord({"totalAmount": "7.25"}))

        assert record.total_amount == 7.25

    def test_date_defaults_to_now(self) -> None:
        """Test that a missing date is close to the current time."""
        record = normalize_record(LooseRecord({}))

        assert abs(record.transaction_date - datetime.now()) < timedelta(seconds=5)
