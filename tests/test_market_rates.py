from __future__ import annotations

from decimal import Decimal

import httpx
import pytest

from divisas.services.market_rate_service import MarketRatePoller, MarketRateService
from tests.support import FIXED_NOW_MS


def _handler(request: httpx.Request) -> httpx.Response:
    dop = {"/v4/latest/USD": 60.12, "/v4/latest/EUR": 65.4}[request.url.path]
    return httpx.Response(200, json={"base": request.url.path.rsplit("/", 1)[-1], "rates": {"DOP": dop}})


def _service(handler) -> MarketRateService:  # noqa: ANN001
    return MarketRateService(
        "https://api.exchangerate-api.com/v4/latest/",
        transport=httpx.MockTransport(handler),
        clock=lambda: FIXED_NOW_MS,
    )


@pytest.mark.asyncio
async def test_fetch_reads_dop_quotes() -> None:
    rates = await _service(_handler).fetch_rates()

    assert rates is not None
    assert rates.usd_dop == Decimal("60.12")
    assert rates.eur_dop == Decimal("65.4")
    assert rates.last_updated == FIXED_NOW_MS


@pytest.mark.asyncio
async def test_http_failure_returns_none() -> None:
    rates = await _service(lambda request: httpx.Response(503)).fetch_rates()

    assert rates is None


@pytest.mark.asyncio
async def test_payload_without_dop_returns_none() -> None:
    rates = await _service(lambda request: httpx.Response(200, json={"rates": {"EUR": 0.9}})).fetch_rates()

    assert rates is None


@pytest.mark.asyncio
async def test_poller_keeps_last_good_value() -> None:
    healthy = True

    def handler(request: httpx.Request) -> httpx.Response:
        if not healthy:
            raise httpx.ConnectError("offline", request=request)
        return _handler(request)

    poller = MarketRatePoller(_service(handler), interval_seconds=60)
    assert poller.latest is None

    first = await poller.refresh()
    healthy = False
    second = await poller.refresh()

    assert first is not None
    assert second == first
    assert poller.latest.usd_dop == Decimal("60.12")


@pytest.mark.asyncio
async def test_poller_start_and_stop() -> None:
    poller = MarketRatePoller(_service(_handler), interval_seconds=3600)

    poller.start()
    await poller.stop()
    await poller.stop()
