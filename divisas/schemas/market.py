"""Reference market-rate schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class MarketRates(BaseModel):
    """Mid-market quotes from the public reference API; informational only."""

    model_config = ConfigDict(populate_by_name=True)

    usd_dop: Decimal
    eur_dop: Decimal
    last_updated: int = Field(alias="lastUpdated")
