from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from divisas.schemas.client import Client
from divisas.schemas.currency import CurrencyPair
from divisas.schemas.report import Timeframe
from divisas.schemas.transaction import Transaction, TransactionType
from divisas.services.report_service import ReportService
from divisas.storage.repositories import Stores
from tests.support import FIXED_NOW_MS

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS


def _tx(tx_id: str, pair: CurrencyPair, direction: TransactionType, amount: str, profit: str, timestamp: int) -> Transaction:
    return Transaction(
        id=tx_id,
        client_id="WALK_IN",
        client_name="Cliente Ocasional",
        type=direction,
        pair=pair,
        amount=Decimal(amount),
        rate=Decimal("58.50"),
        total=Decimal(amount) * Decimal("58.50"),
        estimated_profit=Decimal(profit),
        timestamp=timestamp,
    )


async def _seed(stores: Stores) -> None:
    # Local midnight of 2026-03-10 is 14.5 hours before the fixed clock.
    for tx in [
        _tx("a", CurrencyPair.USD_DOP, TransactionType.BUY, "100", "100.00", FIXED_NOW_MS - HOUR_MS),
        _tx("b", CurrencyPair.EUR_DOP, TransactionType.SELL, "50", "100.00", FIXED_NOW_MS - 2 * HOUR_MS),
        _tx("c", CurrencyPair.USD_DOP, TransactionType.SELL, "20", "20.00", FIXED_NOW_MS - 15 * HOUR_MS),
        _tx("d", CurrencyPair.USD_DOP, TransactionType.BUY, "10", "10.00", FIXED_NOW_MS - 3 * DAY_MS),
        _tx("e", CurrencyPair.USD_DOP, TransactionType.BUY, "7", "7.00", FIXED_NOW_MS - 20 * DAY_MS),
    ]:
        await stores.transactions.append(tx)
    await stores.clients.upsert(Client(id="1", name="Ana", created_at=FIXED_NOW_MS - 2 * DAY_MS))
    await stores.clients.upsert(Client(id="2", name="Luis", created_at=FIXED_NOW_MS - 40 * DAY_MS))


def _service(stores: Stores) -> ReportService:
    return ReportService(stores.transactions, stores.clients, "America/Santo_Domingo", clock=lambda: FIXED_NOW_MS)


@pytest.mark.asyncio
async def test_dashboard_counts_only_the_local_day(memory_stores: Stores) -> None:
    await _seed(memory_stores)

    report = await _service(memory_stores).dashboard()

    assert report.date == date(2026, 3, 10)
    assert report.transaction_count == 2
    assert report.profit == Decimal("200.00")
    assert report.average_ticket == Decimal("100.00")
    assert report.bought_amount == Decimal("100")
    assert report.sold_amount == Decimal("50")
    assert report.client_count == 2
    assert report.new_clients_this_month == 1


@pytest.mark.asyncio
async def test_dashboard_of_empty_day(memory_stores: Stores) -> None:
    report = await _service(memory_stores).dashboard(date(2026, 1, 1))

    assert report.transaction_count == 0
    assert report.average_ticket == 0


@pytest.mark.asyncio
async def test_period_windows(memory_stores: Stores) -> None:
    await _seed(memory_stores)
    service = _service(memory_stores)

    day = await service.period(Timeframe.DAY)
    week = await service.period(Timeframe.WEEK)
    month = await service.period(Timeframe.MONTH)

    assert day.transaction_count == 2
    assert day.volume_usd == Decimal("100")
    assert week.transaction_count == 4
    assert week.profit == Decimal("230.00")
    assert week.volume_usd == Decimal("130")
    assert month.transaction_count == 5


@pytest.mark.asyncio
async def test_profit_chart_is_oldest_first(memory_stores: Stores) -> None:
    await _seed(memory_stores)

    points = await _service(memory_stores).profit_chart(7)

    assert [point.date for point in points][0] == date(2026, 3, 4)
    assert points[-1].date == date(2026, 3, 10)
    assert points[-1].label == "mar"
    assert points[-1].profit == Decimal("200.00")
    assert points[-2].profit == Decimal("20.00")
    assert points[3].date == date(2026, 3, 7)
    assert points[3].profit == Decimal("10.00")
