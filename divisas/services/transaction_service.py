"""Read-side helpers over the transaction log."""

from __future__ import annotations

from typing import Optional

from divisas.api.errors import NotFoundError
from divisas.schemas.transaction import Transaction
from divisas.storage.repositories import TransactionLog


def _matches(tx: Transaction, needle: str) -> bool:
    return needle in tx.client_name.lower() or needle in str(tx.amount) or needle in tx.id.lower()


class TransactionQueryService:
    """History search and lookup; the log itself is only written by the ledger."""

    def __init__(self, transactions: TransactionLog) -> None:
        self._transactions = transactions

    async def search(self, *, query: Optional[str], offset: int, limit: int) -> tuple[int, list[Transaction]]:
        """Return filtered total and one page, newest first."""

        items = await self._transactions.read()
        if query and query.strip():
            needle = query.strip().lower()
            items = [tx for tx in items if _matches(tx, needle)]
        return len(items), items[offset : offset + limit]

    async def get(self, transaction_id: str) -> Transaction:
        for tx in await self._transactions.read():
            if tx.id == transaction_id:
                return tx
        raise NotFoundError(f"Transaction not found: {transaction_id}")
