"""Async database engine/session management."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from divisas.config import get_settings
from divisas.database.base import Base

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_MS = 30000


def _enable_sqlite_wal(engine: AsyncEngine) -> None:
    """WAL plus a busy timeout on every new connection.

    The API and the bot may open the same file from two processes.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
        cursor.close()


class DatabaseManager:
    """Owns the async engine and sessionmaker behind the key-value store."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        settings = get_settings()
        url = make_url(database_url or settings.database_url)
        self._engine = create_async_engine(url, echo=settings.debug, pool_pre_ping=True)
        if url.get_backend_name() == "sqlite":
            _enable_sqlite_wal(self._engine)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            autocommit=False,
        )

    async def connect(self) -> None:
        """Create the key-value table on first start of a fresh device."""

        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        logger.info("Database ready at %s", self._engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self._engine.dispose()

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory


db_manager = DatabaseManager()
