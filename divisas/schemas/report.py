"""Report schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from divisas.schemas.common import CamelSchema


class Timeframe(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class DashboardReport(CamelSchema):
    """Today's figures shown on the dashboard widgets."""

    date: date
    transaction_count: int
    profit: Decimal
    average_ticket: Decimal
    bought_amount: Decimal
    sold_amount: Decimal
    client_count: int
    new_clients_this_month: int


class PeriodReport(CamelSchema):
    """Profit and USD volume since the start of a timeframe."""

    timeframe: Timeframe
    since: int
    transaction_count: int
    profit: Decimal
    volume_usd: Decimal


class ProfitChartPoint(CamelSchema):
    date: date
    label: str
    profit: Decimal
