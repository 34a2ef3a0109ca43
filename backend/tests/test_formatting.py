import pytest

from finassist.services.formatting import (
    format_currency,
    format_percent,
    numbered_lines,
    pluralize,
    progress_bar,
)


@pytest.mark.parametrize(
    ("amount", "currency", "expected"),
    [
        (100, "USD", "$100.00"),
        (1234567.891, "USD", "$1,234,567.89"),
        (-42.5, "USD", "$42.50"),
        (0, "EUR", "€0.00"),
        (1500, "GBP", "£1,500.00"),
        (99.999, "JPY", "¥100.00"),
        (10, "BDT", "৳10.00"),
        (10, "INR", "₹10.00"),
        (10, "ALL", "L10.00"),
        (10, "CAD", "$10.00"),
        (10, "AUD", "$10.00"),
        (10, "CHF", "CHF10.00"),
    ],
)
def test_format_currency(amount, currency, expected) -> None:
    assert format_currency(amount, currency) == expected


def test_format_currency_defaults_to_usd() -> None:
    assert format_currency(5) == "$5.00"


def test_format_percent() -> None:
    assert format_percent(12.345) == "12.3%"
    assert format_percent(25, 2) == "25.00%"


def test_pluralize() -> None:
    assert pluralize(1, "transaction") == "transaction"
    assert pluralize(0, "transaction") == "transactions"
    assert pluralize(2, "person", "people") == "people"


def test_numbered_lines() -> None:
    assert numbered_lines(["a", "b"]) == "1. a\n2. b"


def test_progress_bar_is_clamped_to_width() -> None:
    assert progress_bar(25) == "█" * 5 + "░" * 15
    assert progress_bar(100) == "█" * 20
    assert progress_bar(-10) == "░" * 20
    assert progress_bar(250) == "█" * 20
