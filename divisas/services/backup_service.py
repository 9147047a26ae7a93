"""Backup export, restore and factory reset of the device store."""

from __future__ import annotations

import logging
from typing import Any

from divisas.api.errors import ValidationError
from divisas.schemas.backup import BACKUP_VERSION, BackupDocument
from divisas.schemas.cashbox import CashBox
from divisas.schemas.common import dump_for_storage
from divisas.schemas.preferences import UserPreferences
from divisas.schemas.rates import ExchangeRate
from divisas.storage.kv import KeyValueStore
from divisas.storage.repositories import StorageKeys
from divisas.utils.clock import now_ms

logger = logging.getLogger(__name__)

# Backup field -> (storage key, factory of the default blob)
_SECTIONS: dict[str, tuple[str, Any]] = {
    "clients": (StorageKeys.CLIENTS, list),
    "transactions": (StorageKeys.TRANSACTIONS, list),
    "rates": (StorageKeys.RATES, lambda: dump_for_storage(ExchangeRate.default())),
    "cashbox": (StorageKeys.CASHBOX, lambda: dump_for_storage(CashBox())),
    "adjustments": (StorageKeys.ADJUSTMENTS, list),
    "prefs": (StorageKeys.PREFS, lambda: dump_for_storage(UserPreferences())),
}


class BackupService:
    """Moves raw stored blobs in and out as one JSON document."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def create_backup(self) -> BackupDocument:
        """Bundle every blob as stored; missing blobs are exported as defaults."""

        data: dict[str, Any] = {}
        for section, (key, default_factory) in _SECTIONS.items():
            data[section] = await self._store.get(key, None)
            if data[section] is None:
                data[section] = default_factory()
        return BackupDocument(version=BACKUP_VERSION, timestamp=now_ms(), data=data)

    async def restore_backup(self, document: Any) -> None:
        """Overwrite every blob from ``document['data']``.

        Present sections are written verbatim without shape checks; absent or
        empty sections are reset to their defaults.
        """

        data = document.get("data") if isinstance(document, dict) else None
        if not isinstance(data, dict):
            raise ValidationError("Invalid backup format: missing data section")

        for section, (key, default_factory) in _SECTIONS.items():
            value = data.get(section)
            await self._store.set(key, value if value else default_factory())

        logger.info("Restored backup version %s taken at %s", document.get("version"), document.get("timestamp"))

    async def reset(self) -> None:
        """Factory reset: forget every client, transaction, rate and preference."""

        await self._store.clear()
        logger.warning("Store cleared by factory reset")
