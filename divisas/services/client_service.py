"""Client CRUD/use-case service."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from divisas.api.errors import ConflictError, NotFoundError
from divisas.ledger.engine import new_id
from divisas.schemas.client import Client, ClientCreate, ClientStats
from divisas.storage.repositories import ClientRegistry, TransactionLog
from divisas.utils.clock import now_ms


class ClientService:
    """Service for creating, editing and resolving clients."""

    def __init__(self, registry: ClientRegistry, transactions: TransactionLog) -> None:
        self._registry = registry
        self._transactions = transactions

    async def list_clients(self, search: Optional[str] = None) -> list[Client]:
        """Return clients, optionally filtered by a case-insensitive name fragment."""

        clients = await self._registry.list_clients()
        if not search:
            return clients
        needle = search.strip().lower()
        return [client for client in clients if needle in client.name.lower()]

    async def get_client(self, client_id: str) -> Client:
        client = await self._registry.find(client_id)
        if client is None:
            raise NotFoundError(f"Client not found: {client_id}")
        return client

    async def create_client(self, payload: ClientCreate) -> Client:
        """Create and persist a new client; names are unique ignoring case."""

        normalized = payload.name.lower()
        for existing in await self._registry.list_clients():
            if existing.name.strip().lower() == normalized:
                raise ConflictError(f"A client named {existing.name} already exists")

        client = Client(
            id=new_id(),
            name=payload.name,
            phone=payload.phone,
            cedula=payload.cedula,
            notes=payload.notes,
            created_at=now_ms(),
        )
        await self._registry.upsert(client)
        return client

    async def update_client(self, client_id: str, payload: ClientCreate) -> Client:
        """Edit a client. Past transactions keep the name they were recorded with."""

        current = await self.get_client(client_id)
        updated = current.model_copy(
            update={
                "name": payload.name,
                "phone": payload.phone,
                "cedula": payload.cedula,
                "notes": payload.notes,
            }
        )
        await self._registry.upsert(updated)
        return updated

    async def delete_client(self, client_id: str) -> None:
        if not await self._registry.delete(client_id):
            raise NotFoundError(f"Client not found: {client_id}")

    async def client_stats(self, client_id: str) -> ClientStats:
        """Transaction count and source-currency volume of one client."""

        await self.get_client(client_id)
        matching = [tx for tx in await self._transactions.read() if tx.client_id == client_id]
        return ClientStats(
            client_id=client_id,
            transaction_count=len(matching),
            total_volume=sum((tx.amount for tx in matching), Decimal("0")),
        )
