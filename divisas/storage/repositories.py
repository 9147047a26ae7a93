"""Typed repositories over the key-value store, one per stored blob."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from divisas.api.errors import StorageError
from divisas.schemas.cashbox import CashAdjustment, CashBox
from divisas.schemas.client import Client
from divisas.schemas.common import dump_for_storage
from divisas.schemas.preferences import UserPreferences
from divisas.schemas.rates import ExchangeRate
from divisas.schemas.transaction import Transaction

logger = logging.getLogger(__name__)


class StorageKeys:
    """Keys of the device layout; the suffix is the blob's schema version."""

    CLIENTS = "divisas_clients"
    TRANSACTIONS = "divisas_transactions"
    RATES = "divisas_rates_v3"
    CASHBOX = "divisas_cashbox_v2"
    ADJUSTMENTS = "divisas_adjustments_v1"
    PREFS = "divisas_prefs_v5"


class BlobStore(Protocol):
    async def get(self, key: str, default: object) -> object: ...

    async def set(self, key: str, value: object) -> None: ...


_rates_adapter = TypeAdapter(ExchangeRate)
_clients_adapter = TypeAdapter(list[Client])
_transactions_adapter = TypeAdapter(list[Transaction])
_cashbox_adapter = TypeAdapter(CashBox)
_adjustments_adapter = TypeAdapter(list[CashAdjustment])
_preferences_adapter = TypeAdapter(UserPreferences)


def _parse(adapter: TypeAdapter, raw: object, key: str):
    try:
        return adapter.validate_python(raw)
    except SchemaError as exc:
        logger.error("Stored value under %s does not match its schema: %s", key, exc)
        raise StorageError(f"Stored data under {key} is corrupted") from exc


class RateStore:
    """Current rate sheet. Only manual edits replace it."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def current(self) -> ExchangeRate:
        raw = await self._store.get(StorageKeys.RATES, None)
        if raw is None:
            return ExchangeRate.default()
        return _parse(_rates_adapter, raw, StorageKeys.RATES)

    async def replace(self, rates: ExchangeRate) -> None:
        await self._store.set(StorageKeys.RATES, dump_for_storage(rates))


class ClientRegistry:
    """Client roster in insertion order."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def list_clients(self) -> list[Client]:
        raw = await self._store.get(StorageKeys.CLIENTS, [])
        return _parse(_clients_adapter, raw, StorageKeys.CLIENTS)

    async def find(self, client_id: str) -> Optional[Client]:
        for client in await self.list_clients():
            if client.id == client_id:
                return client
        return None

    async def upsert(self, client: Client) -> None:
        clients = await self.list_clients()
        for index, existing in enumerate(clients):
            if existing.id == client.id:
                clients[index] = client
                break
        else:
            clients.append(client)
        await self._save(clients)

    async def delete(self, client_id: str) -> bool:
        clients = await self.list_clients()
        remaining = [client for client in clients if client.id != client_id]
        if len(remaining) == len(clients):
            return False
        await self._save(remaining)
        return True

    async def _save(self, clients: list[Client]) -> None:
        await self._store.set(StorageKeys.CLIENTS, [dump_for_storage(client) for client in clients])


class TransactionLog:
    """Append-only transaction history, newest first."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def read(self) -> list[Transaction]:
        raw = await self._store.get(StorageKeys.TRANSACTIONS, [])
        return _parse(_transactions_adapter, raw, StorageKeys.TRANSACTIONS)

    async def append(self, transaction: Transaction) -> None:
        existing = await self.read()
        await self._store.set(
            StorageKeys.TRANSACTIONS,
            [dump_for_storage(item) for item in (transaction, *existing)],
        )


class CashboxStore:
    """Singleton cash drawer aggregate."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def read(self) -> CashBox:
        raw = await self._store.get(StorageKeys.CASHBOX, None)
        if raw is None:
            return CashBox()
        return _parse(_cashbox_adapter, raw, StorageKeys.CASHBOX)

    async def replace(self, cashbox: CashBox) -> None:
        await self._store.set(StorageKeys.CASHBOX, dump_for_storage(cashbox))


class AdjustmentLog:
    """Append-only manual adjustment history, newest first."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def read(self) -> list[CashAdjustment]:
        raw = await self._store.get(StorageKeys.ADJUSTMENTS, [])
        return _parse(_adjustments_adapter, raw, StorageKeys.ADJUSTMENTS)

    async def append(self, adjustment: CashAdjustment) -> None:
        existing = await self.read()
        await self._store.set(
            StorageKeys.ADJUSTMENTS,
            [dump_for_storage(item) for item in (adjustment, *existing)],
        )


class PreferencesStore:
    """Operator preferences with every missing field backfilled from defaults."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def read(self) -> UserPreferences:
        raw = await self._store.get(StorageKeys.PREFS, None)
        if not isinstance(raw, dict):
            return UserPreferences()
        if not raw.get("dashboardLayout"):
            raw = {key: value for key, value in raw.items() if key != "dashboardLayout"}
        return _parse(_preferences_adapter, raw, StorageKeys.PREFS)

    async def replace(self, preferences: UserPreferences) -> None:
        await self._store.set(StorageKeys.PREFS, dump_for_storage(preferences))


@dataclass(frozen=True)
class Stores:
    """Every repository over one key-value store, built once per process."""

    rates: RateStore
    clients: ClientRegistry
    transactions: TransactionLog
    cashbox: CashboxStore
    adjustments: AdjustmentLog
    preferences: PreferencesStore

    @classmethod
    def over(cls, store: BlobStore) -> Stores:
        return cls(
            rates=RateStore(store),
            clients=ClientRegistry(store),
            transactions=TransactionLog(store),
            cashbox=CashboxStore(store),
            adjustments=AdjustmentLog(store),
            preferences=PreferencesStore(store),
        )
