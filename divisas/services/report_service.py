"""Operational reporting service over the transaction log."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Optional

from divisas.ledger.engine import round2
from divisas.schemas.currency import Currency
from divisas.schemas.report import DashboardReport, PeriodReport, ProfitChartPoint, Timeframe
from divisas.schemas.transaction import Transaction, TransactionType
from divisas.storage.repositories import ClientRegistry, TransactionLog
from divisas.utils.clock import local_day_bounds_ms, now_ms, to_local

_DAY_MS = 24 * 60 * 60 * 1000
_WEEKDAY_LABELS = ("lun", "mar", "mié", "jue", "vie", "sáb", "dom")
_ZERO = Decimal("0")


def _profit(transactions: list[Transaction]) -> Decimal:
    return sum((tx.estimated_profit for tx in transactions), _ZERO)


class ReportService:
    """Compose dashboard, period and chart figures."""

    def __init__(
        self,
        transactions: TransactionLog,
        clients: ClientRegistry,
        timezone: str,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._transactions = transactions
        self._clients = clients
        self._timezone = timezone
        self._clock = clock

    def _today(self) -> date:
        return to_local(self._clock(), self._timezone).date()

    async def dashboard(self, target_date: Optional[date] = None) -> DashboardReport:
        """Today's profit, ticket count and bought/sold volume plus roster size."""

        target_date = target_date or self._today()
        start, end = local_day_bounds_ms(target_date, self._timezone)
        todays = [tx for tx in await self._transactions.read() if start <= tx.timestamp < end]
        profit = _profit(todays)

        clients = await self._clients.list_clients()
        new_this_month = 0
        for client in clients:
            created = to_local(client.created_at, self._timezone).date()
            if (created.year, created.month) == (target_date.year, target_date.month):
                new_this_month += 1

        return DashboardReport(
            date=target_date,
            transaction_count=len(todays),
            profit=profit,
            average_ticket=round2(profit / len(todays)) if todays else _ZERO,
            bought_amount=sum((tx.amount for tx in todays if tx.type is TransactionType.BUY), _ZERO),
            sold_amount=sum((tx.amount for tx in todays if tx.type is TransactionType.SELL), _ZERO),
            client_count=len(clients),
            new_clients_this_month=new_this_month,
        )

    async def period(self, timeframe: Timeframe) -> PeriodReport:
        """Profit and USD volume since midnight, or over the last 7 / 30 days."""

        if timeframe is Timeframe.DAY:
            since, _ = local_day_bounds_ms(self._today(), self._timezone)
        elif timeframe is Timeframe.WEEK:
            since = self._clock() - 7 * _DAY_MS
        else:
            since = self._clock() - 30 * _DAY_MS

        window = [tx for tx in await self._transactions.read() if tx.timestamp >= since]
        return PeriodReport(
            timeframe=timeframe,
            since=since,
            transaction_count=len(window),
            profit=_profit(window),
            volume_usd=sum((tx.amount for tx in window if tx.pair.source is Currency.USD), _ZERO),
        )

    async def profit_chart(self, days: int = 7) -> list[ProfitChartPoint]:
        """Daily profit for the last ``days`` local days, oldest first."""

        transactions = await self._transactions.read()
        today = self._today()
        points: list[ProfitChartPoint] = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            start, end = local_day_bounds_ms(day, self._timezone)
            points.append(
                ProfitChartPoint(
                    date=day,
                    label=_WEEKDAY_LABELS[day.weekday()],
                    profit=_profit([tx for tx in transactions if start <= tx.timestamp < end]),
                )
            )
        return points
