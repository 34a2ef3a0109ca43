from __future__ import annotations

from collections.abc import Iterable

CURRENCY_SYMBOLS = {
    "USD": "$",
    "BDT": "৳",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "ALL": "L",
    "INR": "₹",
    "CAD": "$",
    "AUD": "$",
}

PROGRESS_FILLED = "█"
PROGRESS_EMPTY = "░"


def format_currency(amount: float, currency: str = "USD") -> str:
    """Render the magnitude of ``amount`` with the currency symbol.

    The sign is dropped; callers phrase direction themselves ("+", "-",
    "in the negative", ...). Unknown currency codes are used as the prefix.
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{symbol}{abs(amount):,.2f}"


def format_percent(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}%"


def pluralize(count: int, word: str, plural: str | None = None) -> str:
    if count == 1:
        return word
    return plural or f"{word}s"


def bullet_lines(items: Iterable[str], marker: str = "•") -> str:
    return "\n".join(f"{marker} {item}" for item in items)


def numbered_lines(items: Iterable[str], separator: str = "\n") -> str:
    return separator.join(f"{idx}. {item}" for idx, item in enumerate(items, start=1))


def progress_bar(percent: float, width: int = 20) -> str:
    filled = int(max(0.0, min(100.0, percent)) // (100 / width))
    return PROGRESS_FILLED * filled + PROGRESS_EMPTY * (width - filled)


def section(header: str, body: str) -> str:
    return f"{header}\n\n{body}"
