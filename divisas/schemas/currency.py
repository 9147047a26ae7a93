"""Currency and currency-pair enums."""

from enum import Enum


class Currency(str, Enum):
    """Currencies held in the cash drawer."""

    USD = "USD"
    EUR = "EUR"
    DOP = "DOP"


class CurrencyPair(str, Enum):
    """Foreign currency quoted against DOP."""

    USD_DOP = "USD_DOP"
    EUR_DOP = "EUR_DOP"

    @property
    def source(self) -> Currency:
        return Currency(self.value.split("_")[0])

    @property
    def target(self) -> Currency:
        return Currency(self.value.split("_")[1])

    @property
    def rate_key(self) -> str:
        """Field name of this pair inside the stored exchange-rate blob."""

        return self.value.lower()
