"""Core ledger: prices exchange operations and applies them to the cash drawer."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, Optional

from divisas.api.errors import StorageError, ValidationError
from divisas.schemas.cashbox import AdjustmentType, CashAdjustment, CashBox
from divisas.schemas.client import Client
from divisas.schemas.currency import Currency, CurrencyPair
from divisas.schemas.rates import ExchangeRate
from divisas.schemas.transaction import Quote, Transaction, TransactionType
from divisas.storage.repositories import Stores
from divisas.utils.clock import now_ms
from divisas.validators.business import ensure_max_decimal, ensure_not_blank, ensure_positive_decimal

logger = logging.getLogger(__name__)

MAX_TRANSACTION_AMOUNT = Decimal("1000000")
WALK_IN_CLIENT_ID = "WALK_IN"
WALK_IN_CLIENT_NAME = "Cliente Ocasional"

_CENTS = Decimal("0.01")
_ZERO = Decimal("0")


def round2(value: Decimal) -> Decimal:
    """Round half-up to cents."""

    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Counterparty:
    """Resolved client identity copied onto a transaction."""

    id: str
    name: str


@dataclass(frozen=True)
class Settlement:
    transaction: Transaction
    cashbox: CashBox


@dataclass(frozen=True)
class AdjustmentResult:
    adjustment: CashAdjustment
    cashbox: CashBox


def quote(pair: CurrencyPair, direction: TransactionType, amount: Decimal, rates: ExchangeRate) -> Quote:
    """Price ``amount`` units of the pair's foreign currency at the current sheet."""

    detail = rates.detail(pair)
    rate_applied = detail.buy if direction is TransactionType.BUY else detail.sell
    # Inverted sheets (sell < buy) report zero profit instead of a loss.
    spread = max(_ZERO, detail.sell - detail.buy)
    try:
        total = round2(amount * rate_applied)
    except InvalidOperation as exc:
        # Result needs more digits than the decimal context carries.
        raise ValidationError("amount or rate out of range") from exc
    return Quote(rate_applied=rate_applied, total=total, estimated_profit=amount * spread)


def validate_amount(amount: Decimal, ceiling: Decimal = MAX_TRANSACTION_AMOUNT) -> None:
    ensure_positive_decimal(amount, "amount")
    ensure_max_decimal(amount, ceiling, "amount")


def resolve_counterparty(
    client: Optional[Client],
    *,
    walk_in_id: str = WALK_IN_CLIENT_ID,
    walk_in_name: str = WALK_IN_CLIENT_NAME,
) -> Counterparty:
    if client is None:
        return Counterparty(id=walk_in_id, name=walk_in_name)
    return Counterparty(id=client.id, name=client.name)


def apply_settlement(cashbox: CashBox, pair: CurrencyPair, direction: TransactionType, amount: Decimal, total: Decimal) -> CashBox:
    """Move the foreign leg by ``amount`` and the DOP leg by ``total`` in opposite directions."""

    sign = 1 if direction is TransactionType.BUY else -1
    updated = cashbox.with_delta(pair.source, sign * amount)
    return updated.with_delta(pair.target, -sign * total)


def build_settlement(
    pair: CurrencyPair,
    direction: TransactionType,
    amount: Decimal,
    counterparty: Counterparty,
    rates: ExchangeRate,
    cashbox: CashBox,
    *,
    ceiling: Decimal = MAX_TRANSACTION_AMOUNT,
    note: Optional[str] = None,
    timestamp: Optional[int] = None,
    transaction_id: Optional[str] = None,
) -> Settlement:
    """Pure settlement: validated transaction plus the cash drawer it leaves behind."""

    validate_amount(amount, ceiling)
    priced = quote(pair, direction, amount, rates)
    transaction = Transaction(
        id=transaction_id or new_id(),
        client_id=counterparty.id,
        client_name=counterparty.name,
        type=direction,
        pair=pair,
        amount=amount,
        rate=priced.rate_applied,
        total=priced.total,
        estimated_profit=priced.estimated_profit,
        timestamp=timestamp if timestamp is not None else now_ms(),
        note=note,
    )
    return Settlement(
        transaction=transaction,
        cashbox=apply_settlement(cashbox, pair, direction, amount, priced.total),
    )


def build_adjustment(
    adjustment_type: AdjustmentType,
    amount: Decimal,
    currency: Currency,
    reason: str,
    cashbox: CashBox,
    *,
    timestamp: Optional[int] = None,
    adjustment_id: Optional[str] = None,
) -> AdjustmentResult:
    """Pure manual movement. Unlike settlements there is no upper bound."""

    ensure_positive_decimal(amount, "amount")
    reason = ensure_not_blank(reason, "reason")
    adjustment = CashAdjustment(
        id=adjustment_id or new_id(),
        type=adjustment_type,
        amount=amount,
        currency=currency,
        reason=reason,
        timestamp=timestamp if timestamp is not None else now_ms(),
    )
    return AdjustmentResult(
        adjustment=adjustment,
        cashbox=cashbox.with_delta(currency, adjustment_type.sign * amount),
    )


class LedgerEngine:
    """Reads one (rates, cashbox) snapshot per call and persists the result.

    Mutations are serialized by an in-process lock so each one runs to
    completion against the state it read. The transaction append and the
    cashbox replace are separate commits; a failure between them is logged
    and not compensated.
    """

    def __init__(
        self,
        stores: Stores,
        *,
        max_amount: Decimal = MAX_TRANSACTION_AMOUNT,
        walk_in_id: str = WALK_IN_CLIENT_ID,
        walk_in_name: str = WALK_IN_CLIENT_NAME,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self._stores = stores
        self._max_amount = max_amount
        self._walk_in_id = walk_in_id
        self._walk_in_name = walk_in_name
        self._clock = clock
        self._id_factory = id_factory
        self._lock = asyncio.Lock()

    @property
    def max_amount(self) -> Decimal:
        return self._max_amount

    async def quote(self, pair: CurrencyPair, direction: TransactionType, amount: Decimal) -> Quote:
        validate_amount(amount, self._max_amount)
        rates = await self._stores.rates.current()
        return quote(pair, direction, amount, rates)

    async def settle(
        self,
        pair: CurrencyPair,
        direction: TransactionType,
        amount: Decimal,
        client_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Settlement:
        """Validate, price and record one operation."""

        validate_amount(amount, self._max_amount)

        async with self._lock:
            rates = await self._stores.rates.current()
            cashbox = await self._stores.cashbox.read()
            client = await self._stores.clients.find(client_id) if client_id else None

            settlement = build_settlement(
                pair,
                direction,
                amount,
                resolve_counterparty(client, walk_in_id=self._walk_in_id, walk_in_name=self._walk_in_name),
                rates,
                cashbox,
                ceiling=self._max_amount,
                note=note,
                timestamp=self._clock(),
                transaction_id=self._id_factory(),
            )

            await self._stores.transactions.append(settlement.transaction)
            try:
                await self._stores.cashbox.replace(settlement.cashbox)
            except StorageError:
                logger.error(
                    "Transaction %s recorded but cashbox update failed; drawer is behind the log",
                    settlement.transaction.id,
                )
                raise

        tx = settlement.transaction
        logger.info("Settled %s %s %s at %s (total %s, client %s)", tx.type.name, tx.amount, tx.pair.value, tx.rate, tx.total, tx.client_id)
        return settlement

    async def adjust_cash(
        self,
        adjustment_type: AdjustmentType,
        amount: Decimal,
        currency: Currency,
        reason: str,
    ) -> AdjustmentResult:
        """Record a manual deposit, withdrawal or expense against the drawer."""

        async with self._lock:
            cashbox = await self._stores.cashbox.read()
            result = build_adjustment(
                adjustment_type,
                amount,
                currency,
                reason,
                cashbox,
                timestamp=self._clock(),
                adjustment_id=self._id_factory(),
            )
            await self._stores.adjustments.append(result.adjustment)
            await self._stores.cashbox.replace(result.cashbox)

        logger.info("Cash %s of %s %s: %s", adjustment_type.value, amount, currency.value, result.adjustment.reason)
        return result
