"""Report endpoints over the transaction log."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from divisas.api.deps import get_report_service
from divisas.schemas.report import DashboardReport, PeriodReport, ProfitChartPoint, Timeframe
from divisas.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/dashboard", response_model=DashboardReport)
async def dashboard_report(
    target_date: Optional[date] = Query(default=None, alias="date"),
    service: ReportService = Depends(get_report_service),
) -> DashboardReport:
    """Return the day's profit, tickets and volume; defaults to today."""

    return await service.dashboard(target_date)


@router.get("/period", response_model=PeriodReport)
async def period_report(
    timeframe: Timeframe = Query(default=Timeframe.DAY),
    service: ReportService = Depends(get_report_service),
) -> PeriodReport:
    return await service.period(timeframe)


@router.get("/profit-chart", response_model=list[ProfitChartPoint])
async def profit_chart(
    days: int = Query(default=7, ge=1, le=90),
    service: ReportService = Depends(get_report_service),
) -> list[ProfitChartPoint]:
    """Daily profit for the trailing days, oldest first."""

    return await service.profit_chart(days)
