"""Tests for amount/contact validation and money formatting."""
from decimal import Decimal

import pytest

from studiodesk.utils.money import format_money
from studiodesk.utils.validation import parse_amount, validate_email, validate_phone


class TestParseAmount:
    @pytest.mark.parametrize("raw,expected", [
        ("85000", Decimal("85000")),
        ("85000.50", Decimal("85000.50")),
        ("1200,5", Decimal("1200.5")),
        (Decimal("99.99"), Decimal("99.99")),
        (500, Decimal("500")),
    ])
    def test_accepts(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "10.123", "-1", "0"])
    def test_rejects(self, raw):
        with pytest.raises(ValueError):
            parse_amount(raw)

    def test_zero_allowed_when_asked(self):
        assert parse_amount("0", allow_zero=True) == Decimal("0")


def test_email_normalised():
    assert validate_email("  Sarah@ApertureStudios.com ") == "sarah@aperturestudios.com"


@pytest.mark.parametrize("raw", ["sarah@", "sarah@aperturestudios..com", "sarah@@aperturestudios.com", ".sarah@aperturestudios.com"])
def test_malformed_email_rejected(raw):
    with pytest.raises(ValueError, match="valid email"):
        validate_email(raw)


def test_phone_exactly_ten_digits():
    assert validate_phone("9876543210") == "9876543210"
    for bad in ("987654321", "98765432101", "+919876543210", "98765 43210"):
        with pytest.raises(ValueError):
            validate_phone(bad)


def test_format_money():
    assert format_money(Decimal("85000")) == "₹85,000"
    assert format_money("1200.5", decimals=2) == "₹1,200.50"
    assert format_money(7500, symbol="$") == "$7,500"
