"""Unit tests for money and date formatting"""

import pytest

from csas_sync.exceptions import ParseError
from csas_sync.formatting import format_amount, format_money, group_thousands, read_amount, short_date


@pytest.mark.parametrize(
    "value,precision,currency,expected",
    [
        ("12345", 2, "CZK", "123.45 CZK"),
        ("500", 0, "USD", "500.00 USD"),
        ("-12345", 2, "CZK", "-123.45 CZK"),
        ("7", 1, "EUR", ".7 EUR"),
        ("1000000", 3, "CZK", "1000.000 CZK"),
    ],
)
def test_format_amount(value: str, precision: int, currency: str, expected: str):
    assert format_amount(value, precision, currency) == expected


def test_format_amount_places_precision_digits_after_point():
    for precision in range(0, 6):
        result = format_amount("9876543", precision, "CZK")
        fraction = result.split(" ")[0].split(".")[1]
        assert len(fraction) == (2 if precision == 0 else precision)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1234567.89", "1 234 567.89"),
        ("-1234", "-1 234"),
        ("123", "123"),
        ("-123", "-123"),
        ("-123456.00 CZK", "-123 456.00 CZK"),
        ("1234.56 CZK", "1 234.56 CZK"),
        ("12", "12"),
        ("1000", "1 000"),
    ],
)
def test_group_thousands(text: str, expected: str):
    assert group_thousands(text) == expected


def test_group_thousands_leaves_fraction_untouched():
    assert group_thousands("1.2345678") == "1.2345678"


def test_format_money_groups_and_places_point():
    assert format_money({"value": "123456", "precision": 2, "currency": "CZK"}) == "1 234.56 CZK"


def test_read_amount_accepts_numeric_value():
    assert read_amount({"value": 150000, "precision": 2, "currency": "CZK"}) == "1500.00 CZK"


@pytest.mark.parametrize(
    "amount",
    [
        None,
        {},
        {"precision": 2, "currency": "CZK"},
        {"value": "12", "precision": 3, "currency": "CZK"},
        {"value": "12", "precision": "two", "currency": "CZK"},
    ],
)
def test_read_amount_rejects_invalid_amounts(amount):
    with pytest.raises(ParseError):
        read_amount(amount)


@pytest.mark.parametrize(
    "timestamp,expected",
    [
        ("2016-11-22T10:15:30", "22.11.2016"),
        ("2016-01-05T00:00:00+0100", "05.01.2016"),
        ("2016-01-05T00:00:00.000", "05.01.2016"),
    ],
)
def test_short_date(timestamp: str, expected: str):
    assert short_date(timestamp) == expected


@pytest.mark.parametrize("timestamp", [None, "", "22.11.2016", "2016-13-01T00:00:00"])
def test_short_date_rejects_malformed(timestamp):
    with pytest.raises(ParseError):
        short_date(timestamp)
