"""Shared wiring for the API and bot entrypoints."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from divisas.config import Settings
from divisas.ledger.engine import LedgerEngine
from divisas.storage.kv import KeyValueStore
from divisas.storage.repositories import Stores

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


def build_ledger(session_factory: async_sessionmaker[AsyncSession], settings: Settings) -> tuple[KeyValueStore, Stores, LedgerEngine]:
    """Key-value store, its repositories and the one engine that mutates them."""

    kv_store = KeyValueStore(session_factory)
    stores = Stores.over(kv_store)
    engine = LedgerEngine(
        stores,
        max_amount=settings.max_transaction_amount,
        walk_in_id=settings.walk_in_client_id,
        walk_in_name=settings.walk_in_client_name,
    )
    return kv_store, stores, engine
