from __future__ import annotations

from decimal import Decimal

import pytest

from divisas.api.errors import StorageError, ValidationError
from divisas.ledger.engine import LedgerEngine, build_adjustment, quote, round2
from divisas.schemas.cashbox import AdjustmentType, CashBox
from divisas.schemas.client import Client
from divisas.schemas.currency import Currency, CurrencyPair
from divisas.schemas.rates import ExchangeRate, RateDetail
from divisas.schemas.transaction import TransactionType
from divisas.storage.repositories import StorageKeys, Stores
from tests.support import FIXED_NOW_MS, MemoryBlobStore


def test_round2_is_half_up() -> None:
    assert round2(Decimal("0.125")) == Decimal("0.13")
    assert round2(Decimal("2.675")) == Decimal("2.68")
    assert round2(Decimal("-0.125")) == Decimal("-0.13")


def test_quote_uses_buy_rate_for_buy_and_sell_rate_for_sell() -> None:
    rates = ExchangeRate.default()

    bought = quote(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("100"), rates)
    sold = quote(CurrencyPair.USD_DOP, TransactionType.SELL, Decimal("100"), rates)

    assert bought.rate_applied == Decimal("58.50")
    assert bought.total == Decimal("5850.00")
    assert sold.rate_applied == Decimal("59.50")
    assert sold.total == Decimal("5950.00")
    assert bought.estimated_profit == sold.estimated_profit == Decimal("100.00")


def test_quote_is_idempotent_and_rounds_total() -> None:
    rates = ExchangeRate(
        usd_dop=RateDetail(buy=Decimal("58.333"), sell=Decimal("59.10")),
        eur_dop=RateDetail(buy=Decimal("63"), sell=Decimal("65")),
    )

    first = quote(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("3"), rates)
    second = quote(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("3"), rates)

    assert first == second
    assert first.total == Decimal("175.00")


def test_inverted_sheet_reports_zero_profit() -> None:
    rates = ExchangeRate(
        usd_dop=RateDetail(buy=Decimal("60"), sell=Decimal("59")),
        eur_dop=RateDetail(buy=Decimal("63"), sell=Decimal("65")),
    )

    priced = quote(CurrencyPair.USD_DOP, TransactionType.SELL, Decimal("10"), rates)

    assert priced.total == Decimal("590.00")
    assert priced.estimated_profit == 0


@pytest.mark.asyncio
async def test_buy_usd_moves_drawer_and_records_transaction(ledger: LedgerEngine, memory_stores: Stores) -> None:
    settlement = await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("100"))

    tx = settlement.transaction
    assert tx.total == Decimal("5850.00")
    assert tx.rate == Decimal("58.50")
    assert tx.estimated_profit == Decimal("100.00")
    assert tx.timestamp == FIXED_NOW_MS
    assert settlement.cashbox.usd_physical == Decimal("100")
    assert settlement.cashbox.dop_physical == Decimal("-5850.00")

    assert await memory_stores.transactions.read() == [tx]
    assert await memory_stores.cashbox.read() == settlement.cashbox


@pytest.mark.asyncio
async def test_sell_usd_moves_drawer_the_other_way(ledger: LedgerEngine) -> None:
    settlement = await ledger.settle(CurrencyPair.USD_DOP, TransactionType.SELL, Decimal("100"))

    assert settlement.transaction.total == Decimal("5950.00")
    assert settlement.cashbox.usd_physical == Decimal("-100")
    assert settlement.cashbox.dop_physical == Decimal("5950.00")


@pytest.mark.asyncio
async def test_eur_settlement_leaves_usd_untouched(ledger: LedgerEngine) -> None:
    settlement = await ledger.settle(CurrencyPair.EUR_DOP, TransactionType.BUY, Decimal("20"))

    assert settlement.transaction.total == Decimal("1260.00")
    assert settlement.cashbox.eur_physical == Decimal("20")
    assert settlement.cashbox.usd_physical == 0
    assert settlement.cashbox.dop_physical == Decimal("-1260.00")


@pytest.mark.asyncio
async def test_over_ceiling_is_rejected_without_side_effects(ledger: LedgerEngine, memory_stores: Stores) -> None:
    await memory_stores.cashbox.replace(CashBox(dop_physical=Decimal("1000")))

    with pytest.raises(ValidationError):
        await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("1000001"))

    assert await memory_stores.transactions.read() == []
    assert (await memory_stores.cashbox.read()).dop_physical == Decimal("1000")


@pytest.mark.asyncio
async def test_ceiling_itself_is_accepted(ledger: LedgerEngine) -> None:
    settlement = await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("1000000"))

    assert settlement.transaction.amount == Decimal("1000000")


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
async def test_non_positive_amount_is_rejected(ledger: LedgerEngine, amount: Decimal) -> None:
    with pytest.raises(ValidationError):
        await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, amount)


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [Decimal("-100"), Decimal("0"), Decimal("1e27")])
async def test_quote_applies_same_amount_limits_as_settle(ledger: LedgerEngine, amount: Decimal) -> None:
    with pytest.raises(ValidationError):
        await ledger.quote(CurrencyPair.USD_DOP, TransactionType.BUY, amount)


def _huge_usd_sheet() -> ExchangeRate:
    return ExchangeRate(
        usd_dop=RateDetail(buy=Decimal("1e30"), sell=Decimal("1e30")),
        eur_dop=RateDetail(buy=Decimal("63"), sell=Decimal("65")),
    )


def test_quote_total_beyond_decimal_precision_is_rejected() -> None:
    with pytest.raises(ValidationError, match="amount or rate out of range"):
        quote(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("1"), _huge_usd_sheet())


@pytest.mark.asyncio
async def test_oversized_rate_rejects_settlement_without_side_effects(
    ledger: LedgerEngine,
    memory_stores: Stores,
) -> None:
    await memory_stores.cashbox.replace(CashBox(dop_physical=Decimal("1000")))
    await memory_stores.rates.replace(_huge_usd_sheet())

    with pytest.raises(ValidationError):
        await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("1"))

    assert await memory_stores.transactions.read() == []
    assert await memory_stores.cashbox.read() == CashBox(dop_physical=Decimal("1000"))


@pytest.mark.asyncio
async def test_unknown_client_falls_back_to_walk_in(ledger: LedgerEngine) -> None:
    settlement = await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("10"), client_id="missing")

    assert settlement.transaction.client_id == "WALK_IN"
    assert settlement.transaction.client_name == "Cliente Ocasional"


@pytest.mark.asyncio
async def test_known_client_name_is_snapshotted(ledger: LedgerEngine, memory_stores: Stores) -> None:
    client = Client(id="c-1", name="Maria Perez", created_at=FIXED_NOW_MS)
    await memory_stores.clients.upsert(client)

    settlement = await ledger.settle(CurrencyPair.USD_DOP, TransactionType.SELL, Decimal("5"), client_id="c-1", note="ref 7")
    await memory_stores.clients.upsert(client.model_copy(update={"name": "Maria P. Gomez"}))

    stored = (await memory_stores.transactions.read())[0]
    assert stored.client_id == "c-1"
    assert stored.client_name == "Maria Perez"
    assert stored.note == "ref 7"
    assert settlement.transaction == stored


@pytest.mark.asyncio
async def test_settlement_uses_rates_at_call_time(ledger: LedgerEngine, memory_stores: Stores) -> None:
    first = await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("1"))
    await memory_stores.rates.replace(
        ExchangeRate(
            usd_dop=RateDetail(buy=Decimal("57"), sell=Decimal("58")),
            eur_dop=RateDetail(buy=Decimal("63"), sell=Decimal("65")),
        )
    )
    second = await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("1"))

    history = await memory_stores.transactions.read()
    assert [tx.id for tx in history] == [second.transaction.id, first.transaction.id]
    assert history[1].rate == Decimal("58.50")
    assert history[0].rate == Decimal("57")


@pytest.mark.asyncio
async def test_deposit_adds_to_physical_balance(ledger: LedgerEngine, memory_stores: Stores) -> None:
    await memory_stores.cashbox.replace(CashBox(dop_physical=Decimal("1000")))

    result = await ledger.adjust_cash(AdjustmentType.DEPOSIT, Decimal("500"), Currency.DOP, "Aporte Capital")

    assert result.cashbox.dop_physical == Decimal("1500")
    assert result.adjustment.type is AdjustmentType.DEPOSIT
    assert result.adjustment.reason == "Aporte Capital"
    assert await memory_stores.adjustments.read() == [result.adjustment]


@pytest.mark.asyncio
async def test_adjustment_and_inverse_restore_drawer(ledger: LedgerEngine, memory_stores: Stores) -> None:
    opening = CashBox(usd_physical=Decimal("250.50"), dop_physical=Decimal("1000"))
    await memory_stores.cashbox.replace(opening)

    await ledger.adjust_cash(AdjustmentType.WITHDRAWAL, Decimal("75.25"), Currency.USD, "Retiro")
    result = await ledger.adjust_cash(AdjustmentType.DEPOSIT, Decimal("75.25"), Currency.USD, "Reposición")

    assert result.cashbox == opening
    assert len(await memory_stores.adjustments.read()) == 2


@pytest.mark.asyncio
async def test_expense_may_drive_balance_negative(ledger: LedgerEngine) -> None:
    result = await ledger.adjust_cash(AdjustmentType.EXPENSE, Decimal("300"), Currency.DOP, "Luz")

    assert result.cashbox.dop_physical == Decimal("-300")


@pytest.mark.asyncio
async def test_blank_reason_is_rejected(ledger: LedgerEngine, memory_stores: Stores) -> None:
    with pytest.raises(ValidationError):
        await ledger.adjust_cash(AdjustmentType.EXPENSE, Decimal("10"), Currency.DOP, "   ")

    assert await memory_stores.adjustments.read() == []


def test_adjustment_has_no_upper_bound() -> None:
    result = build_adjustment(AdjustmentType.DEPOSIT, Decimal("5000000"), Currency.DOP, "Capital", CashBox())

    assert result.cashbox.dop_physical == Decimal("5000000")


@pytest.mark.asyncio
async def test_cashbox_write_failure_leaves_log_ahead(
    ledger: LedgerEngine,
    memory_store: MemoryBlobStore,
    memory_stores: Stores,
) -> None:
    memory_store.fail_on.add(StorageKeys.CASHBOX)

    with pytest.raises(StorageError):
        await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("10"))

    assert len(await memory_stores.transactions.read()) == 1
    assert await memory_stores.cashbox.read() == CashBox()


@pytest.mark.asyncio
async def test_transaction_write_failure_leaves_drawer_untouched(
    ledger: LedgerEngine,
    memory_store: MemoryBlobStore,
    memory_stores: Stores,
) -> None:
    memory_store.fail_on.add(StorageKeys.TRANSACTIONS)

    with pytest.raises(StorageError):
        await ledger.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("10"))

    assert await memory_stores.cashbox.read() == CashBox()


@pytest.mark.asyncio
async def test_engine_reads_configured_ceiling(memory_stores: Stores) -> None:
    engine = LedgerEngine(memory_stores, max_amount=Decimal("500"))

    with pytest.raises(ValidationError):
        await engine.settle(CurrencyPair.USD_DOP, TransactionType.BUY, Decimal("500.01"))
