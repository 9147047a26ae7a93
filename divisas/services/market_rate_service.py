"""Reference market rates from a public API, polled in the background."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Callable, Optional

import httpx

from divisas.config import Settings
from divisas.schemas.market import MarketRates
from divisas.utils.clock import now_ms

logger = logging.getLogger(__name__)


class MarketRateService:
    """Best-effort fetch of USD/DOP and EUR/DOP mid-market quotes.

    Never raises: any transport or payload problem returns ``None`` so the
    dashboard simply hides the widget.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> MarketRateService:
        return cls(settings.market_rates_url, timeout=settings.market_rates_timeout_seconds)

    async def _dop_per(self, client: httpx.AsyncClient, currency: str) -> Decimal:
        response = await client.get(f"{self._base_url}/{currency}")
        response.raise_for_status()
        return Decimal(str(response.json()["rates"]["DOP"]))

    async def fetch_rates(self) -> Optional[MarketRates]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                usd_dop = await self._dop_per(client, "USD")
                eur_dop = await self._dop_per(client, "EUR")
        except (httpx.HTTPError, KeyError, TypeError, ValueError, ArithmeticError) as exc:
            logger.warning("Market rate fetch failed: %s", exc)
            return None
        return MarketRates(usd_dop=usd_dop, eur_dop=eur_dop, last_updated=self._clock())


class MarketRatePoller:
    """Keeps the latest reference quotes in memory; unrelated to the ledger."""

    def __init__(self, service: MarketRateService, interval_seconds: float) -> None:
        self._service = service
        self._interval = interval_seconds
        self._latest: Optional[MarketRates] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def latest(self) -> Optional[MarketRates]:
        return self._latest

    async def refresh(self) -> Optional[MarketRates]:
        rates = await self._service.fetch_rates()
        if rates is not None:
            self._latest = rates
        return self._latest

    async def _run(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="market-rate-poller")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
