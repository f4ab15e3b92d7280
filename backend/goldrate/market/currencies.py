"""Display currencies offered to consumers of the feed."""

from __future__ import annotations

from typing import NamedTuple


class Currency(NamedTuple):
    code: str
    name: str
    symbol: str


SUPPORTED_CURRENCIES: tuple[Currency, ...] = (
    Currency("USD", "US Dollar", "$"),
    Currency("EUR", "Euro", "€"),
    Currency("GBP", "British Pound", "£"),
    Currency("JPY", "Japanese Yen", "¥"),
    Currency("CAD", "Canadian Dollar", "C$"),
    Currency("AUD", "Australian Dollar", "A$"),
    Currency("CHF", "Swiss Franc", "CHF"),
    Currency("CNY", "Chinese Yuan", "¥"),
)

_BY_CODE: dict[str, Currency] = {c.code: c for c in SUPPORTED_CURRENCIES}


def normalize_code(code: str) -> str:
    """Canonical form of a currency code ('  eur ' -> 'EUR')."""
    return code.upper().strip()


def is_supported(code: str) -> bool:
    return normalize_code(code) in _BY_CODE


def currency_symbol(code: str) -> str:
    """Display symbol for a currency code. Unknown codes get '$'."""
    currency = _BY_CODE.get(normalize_code(code))
    return currency.symbol if currency else "$"
