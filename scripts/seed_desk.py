"""Seed the default rate sheet and an empty cash drawer on a fresh install."""

from __future__ import annotations

import asyncio

from divisas.database.session import db_manager
from divisas.schemas.cashbox import CashBox
from divisas.schemas.rates import ExchangeRate
from divisas.storage.kv import KeyValueStore
from divisas.storage.repositories import StorageKeys, Stores


async def seed() -> None:
    """Write rates and cashbox only if they were never stored."""

    await db_manager.connect()
    kv_store = KeyValueStore(db_manager.session_factory)
    stores = Stores.over(kv_store)

    if await kv_store.get(StorageKeys.RATES, None) is None:
        await stores.rates.replace(ExchangeRate.default())
    if await kv_store.get(StorageKeys.CASHBOX, None) is None:
        await stores.cashbox.replace(CashBox())


async def main() -> None:
    try:
        await seed()
    finally:
        await db_manager.dispose()


if __name__ == "__main__":
    asyncio.run(main())
