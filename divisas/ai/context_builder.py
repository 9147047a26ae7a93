"""Context builder: formats the day's transactions as text for the AI."""

from __future__ import annotations

from divisas.schemas.transaction import Transaction


def summarize_transactions(transactions: list[Transaction]) -> str:
    """One line per operation, oldest first."""

    lines = [
        f"- {tx.type.value} ({tx.pair.value}): {tx.amount} a tasa {tx.rate} (Total: {tx.total})"
        for tx in sorted(transactions, key=lambda item: item.timestamp)
    ]
    return "\n".join(lines)
