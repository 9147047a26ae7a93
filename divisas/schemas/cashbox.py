"""Cash drawer and manual adjustment schemas."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from divisas.schemas.common import CamelSchema
from divisas.schemas.currency import Currency

_PHYSICAL_FIELDS = {
    Currency.USD: "usd_physical",
    Currency.EUR: "eur_physical",
    Currency.DOP: "dop_physical",
}


class CashBox(CamelSchema):
    """Till balances. Negative values are allowed and mean a shortfall."""

    usd_physical: Decimal = Decimal("0")
    eur_physical: Decimal = Decimal("0")
    dop_physical: Decimal = Decimal("0")
    usd_bank: Decimal = Decimal("0")
    dop_bank: Decimal = Decimal("0")

    def physical(self, currency: Currency) -> Decimal:
        return getattr(self, _PHYSICAL_FIELDS[currency])

    def with_delta(self, currency: Currency, delta: Decimal) -> CashBox:
        """Return a copy with ``delta`` added to the physical balance of ``currency``."""

        field = _PHYSICAL_FIELDS[currency]
        return self.model_copy(update={field: getattr(self, field) + delta})


class AdjustmentType(str, Enum):
    """Manual cash movement kinds."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    EXPENSE = "EXPENSE"

    @property
    def sign(self) -> int:
        return 1 if self is AdjustmentType.DEPOSIT else -1


class CashAdjustment(BaseModel):
    """Recorded manual movement; immutable, append-only."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    type: AdjustmentType
    amount: Decimal
    currency: Currency
    reason: str
    timestamp: int


class AdjustmentCreate(BaseModel):
    """Payload for a manual deposit, withdrawal or expense."""

    type: AdjustmentType
    amount: Decimal
    currency: Currency
    reason: str = ""


class AdjustmentResponse(CamelSchema):
    adjustment: CashAdjustment
    cashbox: CashBox
