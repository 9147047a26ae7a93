"""Reference market rate endpoint."""

from fastapi import APIRouter, Depends

from divisas.api.deps import get_market_poller
from divisas.api.errors import PeripheralError
from divisas.schemas.market import MarketRates
from divisas.services.market_rate_service import MarketRatePoller

router = APIRouter(prefix="/market", tags=["market"])


@router.get("/rates", response_model=MarketRates)
async def market_rates(poller: MarketRatePoller = Depends(get_market_poller)) -> MarketRates:
    """Latest polled mid-market quotes; informational only."""

    if poller.latest is None:
        raise PeripheralError("Market rates are not available yet")
    return poller.latest
