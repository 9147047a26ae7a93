"""JSON key-value store backed by the ``kv_store`` table."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from divisas.api.errors import StorageError
from divisas.database.models import StoredBlob

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Single-writer store of independently keyed JSON documents.

    Every ``set`` commits on its own; there is no transaction spanning keys.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str, default: Any) -> Any:
        """Return the decoded document under ``key`` or ``default`` when absent or unreadable."""

        try:
            async with self._session_factory() as session:
                row = await session.get(StoredBlob, key)
                raw = row.value if row is not None else None
        except SQLAlchemyError as exc:
            logger.error("Failed to read key %s: %s", key, exc)
            raise StorageError(f"Failed to read key {key}") from exc

        if not raw:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.error("Stored value under %s is not valid JSON; using default", key)
            return default

    async def set(self, key: str, value: Any) -> None:
        """Replace the document under ``key``."""

        payload = json.dumps(value, ensure_ascii=False)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    row = await session.get(StoredBlob, key)
                    if row is None:
                        session.add(StoredBlob(key=key, value=payload))
                    else:
                        row.value = payload
        except SQLAlchemyError as exc:
            logger.error("Failed to persist key %s: %s", key, exc)
            raise StorageError(f"Failed to persist key {key}") from exc

    async def clear(self) -> None:
        """Drop every stored document."""

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(delete(StoredBlob))
        except SQLAlchemyError as exc:
            logger.error("Failed to clear the store: %s", exc)
            raise StorageError("Failed to clear the store") from exc
