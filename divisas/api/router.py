"""Top-level API router aggregation."""

from fastapi import APIRouter

from divisas.api.routes.ai import router as ai_router
from divisas.api.routes.backup import router as backup_router
from divisas.api.routes.cashbox import router as cashbox_router
from divisas.api.routes.clients import router as clients_router
from divisas.api.routes.market import router as market_router
from divisas.api.routes.preferences import router as preferences_router
from divisas.api.routes.printer import router as printer_router
from divisas.api.routes.rates import router as rates_router
from divisas.api.routes.reports import router as reports_router
from divisas.api.routes.transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(rates_router)
api_router.include_router(transactions_router)
api_router.include_router(cashbox_router)
api_router.include_router(clients_router)
api_router.include_router(preferences_router)
api_router.include_router(backup_router)
api_router.include_router(reports_router)
api_router.include_router(market_router)
api_router.include_router(printer_router)
api_router.include_router(ai_router)
