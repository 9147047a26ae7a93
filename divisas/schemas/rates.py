"""Exchange-rate schemas."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from divisas.schemas.currency import CurrencyPair
from divisas.utils.clock import now_ms


class RateDetail(BaseModel):
    """Buy is what the desk pays for foreign currency, sell is what it charges."""

    buy: Decimal
    sell: Decimal


class ExchangeRate(BaseModel):
    """Current rate sheet for every supported pair."""

    model_config = ConfigDict(populate_by_name=True)

    usd_dop: RateDetail
    eur_dop: RateDetail
    last_updated: int = Field(default_factory=now_ms, alias="lastUpdated")

    @classmethod
    def default(cls) -> ExchangeRate:
        return cls(
            usd_dop=RateDetail(buy=Decimal("58.50"), sell=Decimal("59.50")),
            eur_dop=RateDetail(buy=Decimal("63.00"), sell=Decimal("65.00")),
        )

    def detail(self, pair: CurrencyPair) -> RateDetail:
        return getattr(self, pair.rate_key)


class RatesUpdate(BaseModel):
    """Manual rate edit payload; not checked for sell >= buy."""

    usd_dop: RateDetail
    eur_dop: RateDetail

    def to_exchange_rate(self) -> ExchangeRate:
        return ExchangeRate(usd_dop=self.usd_dop, eur_dop=self.eur_dop)
