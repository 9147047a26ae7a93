from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from divisas.schemas.currency import Currency

_SYMBOLS = {
    Currency.DOP: "RD$",
    Currency.USD: "$",
    Currency.EUR: "€",
}

_CENT = Decimal("0.01")


def currency_symbol(currency: Currency) -> str:
    return _SYMBOLS.get(currency, currency.value)


def format_amount(amount: Union[Decimal, int, float, str]) -> str:
    """Fixed two decimals, half-up, with comma thousands: 5850 -> '5,850.00'."""

    try:
        value = Decimal(str(amount))
    except ArithmeticError:
        value = Decimal("0")
    try:
        value = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    except ArithmeticError:
        # Wider than the decimal context; format unrounded.
        pass
    return f"{value:,.2f}"


def format_total(amount: Union[Decimal, int, float, str]) -> str:
    """Like ``format_amount`` but drops a zero cents part: 5850.00 -> '5,850'."""

    formatted = format_amount(amount)
    if formatted.endswith(".00"):
        return formatted[:-3]
    return formatted
