"""Transaction schemas."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from divisas.schemas.cashbox import CashBox
from divisas.schemas.common import CamelSchema
from divisas.schemas.currency import CurrencyPair


class TransactionType(str, Enum):
    """Direction of an exchange operation, stored with its Spanish label."""

    BUY = "COMPRA"  # desk buys foreign currency from the client
    SELL = "VENTA"  # desk sells foreign currency to the client

    @classmethod
    def _missing_(cls, value: Any) -> Optional[TransactionType]:
        if isinstance(value, str):
            normalized = value.strip().upper()
            for member in cls:
                if normalized in (member.name, member.value):
                    return member
        return None


class Transaction(BaseModel):
    """Settled operation; immutable once created."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    client_id: str
    client_name: str
    type: TransactionType
    pair: CurrencyPair
    amount: Decimal
    rate: Decimal
    total: Decimal
    estimated_profit: Decimal = Decimal("0")
    timestamp: int
    note: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def accept_english_names(cls, value: Any) -> Any:
        return TransactionType(value) if isinstance(value, str) else value


class QuoteRequest(CamelSchema):
    """Price an operation without recording it."""

    pair: CurrencyPair
    type: TransactionType
    amount: Decimal

    @field_validator("type", mode="before")
    @classmethod
    def accept_english_names(cls, value: Any) -> Any:
        return TransactionType(value) if isinstance(value, str) else value


class SettleRequest(QuoteRequest):
    """Record an operation against the current rates."""

    client_id: Optional[str] = None
    note: Optional[str] = None


class Quote(CamelSchema):
    """Priced operation."""

    rate_applied: Decimal
    total: Decimal
    estimated_profit: Decimal


class SettlementResponse(CamelSchema):
    transaction: Transaction
    cashbox: CashBox


class TransactionListResponse(BaseModel):
    """Filtered page of the transaction log, newest first."""

    total: int
    items: list[Transaction]
