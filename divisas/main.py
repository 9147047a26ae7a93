"""FastAPI entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from divisas.api.errors import register_exception_handlers
from divisas.api.router import api_router
from divisas.bootstrap import build_ledger, configure_logging
from divisas.config import Settings, get_settings
from divisas.database.migrations import run_migrations, should_run_migrations
from divisas.database.session import db_manager
from divisas.security.telegram_auth import require_api_auth
from divisas.services.market_rate_service import MarketRatePoller, MarketRateService

logger = logging.getLogger(__name__)


def attach_state(app: FastAPI, session_factory: async_sessionmaker[AsyncSession], settings: Settings) -> None:
    """Build the process-wide stores, engine and poller on ``app.state``."""

    kv_store, stores, engine = build_ledger(session_factory, settings)
    app.state.kv_store = kv_store
    app.state.stores = stores
    app.state.ledger_engine = engine
    app.state.market_poller = MarketRatePoller(
        MarketRateService.from_settings(settings),
        interval_seconds=settings.market_rates_poll_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store, start reference-rate polling and release both on shutdown."""

    settings = get_settings()
    configure_logging(settings)

    if should_run_migrations():
        await run_migrations()
    await db_manager.connect()

    attach_state(app, db_manager.session_factory, settings)
    poller: MarketRatePoller = app.state.market_poller
    if settings.market_rates_enabled:
        poller.start()
    logger.info("%s started", settings.app_name)
    try:
        yield
    finally:
        await poller.stop()
        await db_manager.dispose()


settings = get_settings()
app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
app.include_router(api_router, prefix=settings.api_v1_prefix, dependencies=[Depends(require_api_auth)])
register_exception_handlers(app)


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    """Simple endpoint for uptime checks."""

    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("divisas.main:app", host="0.0.0.0", port=8000)
