"""Dependency helpers for API layer."""

from fastapi import Depends, Request

from divisas.ai.analysis_service import DayAnalysisService
from divisas.config import Settings, get_settings
from divisas.ledger.engine import LedgerEngine
from divisas.services.backup_service import BackupService
from divisas.services.client_service import ClientService
from divisas.services.market_rate_service import MarketRatePoller
from divisas.services.receipt_service import ReceiptService
from divisas.services.report_service import ReportService
from divisas.services.transaction_service import TransactionQueryService
from divisas.storage.kv import KeyValueStore
from divisas.storage.repositories import Stores


def get_stores(request: Request) -> Stores:
    """Repositories built once at startup."""

    return request.app.state.stores


def get_kv_store(request: Request) -> KeyValueStore:
    return request.app.state.kv_store


def get_ledger_engine(request: Request) -> LedgerEngine:
    """Process-wide engine; its lock must be shared by every request."""

    return request.app.state.ledger_engine


def get_market_poller(request: Request) -> MarketRatePoller:
    return request.app.state.market_poller


def get_client_service(stores: Stores = Depends(get_stores)) -> ClientService:
    return ClientService(stores.clients, stores.transactions)


def get_transaction_query_service(stores: Stores = Depends(get_stores)) -> TransactionQueryService:
    return TransactionQueryService(stores.transactions)


def get_report_service(
    stores: Stores = Depends(get_stores),
    settings: Settings = Depends(get_settings),
) -> ReportService:
    return ReportService(stores.transactions, stores.clients, settings.timezone)


def get_receipt_service(settings: Settings = Depends(get_settings)) -> ReceiptService:
    return ReceiptService(settings.timezone, width=settings.receipt_width)


def get_backup_service(store: KeyValueStore = Depends(get_kv_store)) -> BackupService:
    return BackupService(store)


def get_analysis_service(settings: Settings = Depends(get_settings)) -> DayAnalysisService:
    """Build AI analysis service dependency."""

    return DayAnalysisService.from_settings(settings)
