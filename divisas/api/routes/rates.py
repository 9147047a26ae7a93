"""Rate sheet endpoints."""

from fastapi import APIRouter, Depends

from divisas.api.deps import get_stores
from divisas.schemas.rates import ExchangeRate, RatesUpdate
from divisas.storage.repositories import Stores

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("", response_model=ExchangeRate)
async def get_rates(stores: Stores = Depends(get_stores)) -> ExchangeRate:
    """Return the current rate sheet, or the defaults before the first edit."""

    return await stores.rates.current()


@router.put("", response_model=ExchangeRate)
async def update_rates(payload: RatesUpdate, stores: Stores = Depends(get_stores)) -> ExchangeRate:
    """Replace the rate sheet; already settled transactions keep their rate."""

    rates = payload.to_exchange_rate()
    await stores.rates.replace(rates)
    return rates
