from __future__ import annotations

from decimal import Decimal

from divisas.schemas.currency import Currency
from divisas.utils.formatters import currency_symbol, format_amount, format_total


def test_format_amount_rounds_half_up() -> None:
    assert format_amount(Decimal("10.005")) == "10.01"
    assert format_amount(Decimal("2.675")) == "2.68"
    assert format_amount(Decimal("-10.005")) == "-10.01"
    assert format_amount("5850") == "5,850.00"


def test_format_total_drops_zero_cents_after_rounding() -> None:
    assert format_total(Decimal("5849.995")) == "5,850"
    assert format_total(Decimal("5850.5")) == "5,850.50"


def test_format_amount_tolerates_bad_input() -> None:
    assert format_amount("abc") == "0.00"
    assert format_amount(Decimal("1e30")) == "1,000,000,000,000,000,000,000,000,000,000.00"


def test_currency_symbols() -> None:
    assert currency_symbol(Currency.DOP) == "RD$"
    assert currency_symbol(Currency.EUR) == "€"
