"""Tests for UI-boundary input parsing"""
from decimal import Decimal

import pytest

from storefront.utils.validators import clean_text, parse_number, parse_price_max, parse_quantity


class TestParseNumber:
    """Tests for parse_number."""

    @pytest.mark.parametrize("raw,expected", [
        ("12", Decimal("12")),
        (" 12 000 ", Decimal("12000")),
        ("12\u00a0000", Decimal("12000")),
        ("2,5", Decimal("2.5")),
        (7, Decimal("7")),
        (1.5, Decimal("1.5")),
    ])
    def test_valid(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "NaN", "inf", True, [], {}])
    def test_invalid(self, raw):
        assert parse_number(raw) is None


class TestParseQuantity:
    """Tests for parse_quantity."""

    @pytest.mark.parametrize("raw,expected", [
        ("3", 3),
        (3, 3),
        ("2.7", 2),
        ("0", 1),
        ("-4", 1),
        ("", 1),
        (None, 1),
        ("beaucoup", 1),
    ])
    def test_clamped_to_at_least_one(self, raw, expected):
        assert parse_quantity(raw) == expected


class TestParsePriceMax:
    """Tests for parse_price_max."""

    def test_missing_means_no_ceiling(self):
        assert parse_price_max(None) == 0
        assert parse_price_max("") == 0

    def test_negative_and_invalid(self):
        assert parse_price_max("-100") == 0
        assert parse_price_max("cher") == 0

    def test_valid(self):
        assert parse_price_max("15000") == Decimal("15000")


def test_clean_text():
    """Test stripping free text"""
    assert clean_text("  café ") == "café"
    assert clean_text(None) == ""
    assert clean_text(12) == ""
