from __future__ import annotations

import itertools
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from divisas.api.errors import register_exception_handlers
from divisas.api.router import api_router
from divisas.config import get_settings
from divisas.database.base import Base
from divisas.ledger.engine import LedgerEngine
from divisas.main import attach_state
from divisas.security.telegram_auth import require_api_auth
from divisas.storage.kv import KeyValueStore
from divisas.storage.repositories import Stores
from tests.support import FIXED_NOW_MS, MemoryBlobStore


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set deterministic test env and reset cached Settings."""

    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("ALLOWED_TELEGRAM_IDS", "1001,1002")
    monkeypatch.setenv("AI_API_KEY", "")
    monkeypatch.setenv("TIMEZONE", "America/Santo_Domingo")
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "test-bot-token")
    monkeypatch.setenv("MARKET_RATES_ENABLED", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def session_factory(tmp_path: Path) -> async_sessionmaker[AsyncSession]:
    """Provide isolated sqlite session factory per test."""

    db_path = tmp_path / "test.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest.fixture
def kv_store(session_factory: async_sessionmaker[AsyncSession]) -> KeyValueStore:
    return KeyValueStore(session_factory)


@pytest.fixture
def memory_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def memory_stores(memory_store: MemoryBlobStore) -> Stores:
    return Stores.over(memory_store)


@pytest.fixture
def ledger(memory_stores: Stores) -> LedgerEngine:
    """Engine over the in-memory double with a fixed clock and sequential ids."""

    counter = itertools.count(1)
    return LedgerEngine(
        memory_stores,
        clock=lambda: FIXED_NOW_MS,
        id_factory=lambda: f"00000000-0000-4000-8000-{next(counter):012d}",
    )


@pytest.fixture
def api_app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Build API app over the test DB."""

    app = FastAPI()
    app.include_router(api_router, prefix="/api/v1", dependencies=[Depends(require_api_auth)])
    register_exception_handlers(app)
    attach_state(app, session_factory, get_settings())
    return app


@pytest_asyncio.fixture
async def api_client(api_app: FastAPI) -> httpx.AsyncClient:
    """ASGI client for API integration tests."""

    transport = httpx.ASGITransport(app=api_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def allowed_headers() -> dict[str, str]:
    return {"X-Telegram-Id": "1001"}


@pytest.fixture
def denied_headers() -> dict[str, str]:
    return {"X-Telegram-Id": "9999"}
