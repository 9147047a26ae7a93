"""Telegram bot handlers for the exchange desk."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from aiogram import F, Router
from aiogram.filters import CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from divisas.api.errors import AppError
from divisas.bot import texts
from divisas.bot.keyboards.main_menu import OPERATION_BUTTONS, confirm_keyboard, main_menu_keyboard
from divisas.bot.states.exchange import SettleStates
from divisas.config import get_settings
from divisas.ledger.engine import LedgerEngine
from divisas.schemas.cashbox import CashBox
from divisas.schemas.currency import CurrencyPair
from divisas.schemas.rates import ExchangeRate
from divisas.schemas.report import DashboardReport
from divisas.schemas.transaction import Quote, TransactionType
from divisas.security.telegram_auth import is_bot_user_allowed
from divisas.services.receipt_service import ReceiptService
from divisas.services.report_service import ReportService
from divisas.storage.repositories import Stores
from divisas.utils.formatters import format_amount

logger = logging.getLogger(__name__)

router = Router()


def parse_amount(raw: Optional[str]) -> Optional[Decimal]:
    """Operator input such as ``1,250.50``; ``None`` when not a positive number."""

    try:
        amount = Decimal((raw or "").strip().replace(",", ""))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def rates_message(rates: ExchangeRate) -> str:
    lines = ["💱 Tasas actuales"]
    for pair in CurrencyPair:
        detail = rates.detail(pair)
        lines.append(f"{pair.source.value}: compra {format_amount(detail.buy)} / venta {format_amount(detail.sell)}")
    return "\n".join(lines)


def cashbox_message(cashbox: CashBox) -> str:
    return (
        "💰 Caja\n"
        f"USD: {format_amount(cashbox.usd_physical)}\n"
        f"EUR: {format_amount(cashbox.eur_physical)}\n"
        f"DOP: {format_amount(cashbox.dop_physical)}"
    )


def summary_message(report: DashboardReport) -> str:
    return (
        f"📊 Resumen {report.date.strftime('%d/%m/%Y')}\n"
        f"Operaciones: {report.transaction_count}\n"
        f"Ganancia: RD$ {format_amount(report.profit)}\n"
        f"Ticket promedio: RD$ {format_amount(report.average_ticket)}\n"
        f"Comprado: {format_amount(report.bought_amount)}\n"
        f"Vendido: {format_amount(report.sold_amount)}"
    )


def quote_message(pair: CurrencyPair, direction: TransactionType, amount: Decimal, quote: Quote) -> str:
    verb = "Compra" if direction is TransactionType.BUY else "Venta"
    return (
        "Confirme la operación:\n"
        f"{verb} {format_amount(amount)} {pair.source.value}\n"
        f"Tasa: {format_amount(quote.rate_applied)}\n"
        f"Total: RD$ {format_amount(quote.total)}"
    )


async def _ensure_allowed_message(message: Message) -> bool:
    settings = get_settings()
    user_id = message.from_user.id if message.from_user else None
    if user_id is None or not is_bot_user_allowed(user_id, settings):
        await message.answer(texts.ACCESS_DENIED)
        return False
    return True


async def _ensure_allowed_callback(callback: CallbackQuery) -> bool:
    settings = get_settings()
    user_id = callback.from_user.id if callback.from_user else None
    if user_id is None or not is_bot_user_allowed(user_id, settings):
        await callback.message.answer(texts.ACCESS_DENIED)
        await callback.answer()
        return False
    return True


@router.message(CommandStart())
async def on_start(message: Message, state: FSMContext) -> None:
    """Reset state and show main menu."""

    if not await _ensure_allowed_message(message):
        return
    await state.clear()
    await message.answer(texts.MAIN_MENU_TITLE, reply_markup=main_menu_keyboard())


@router.message(F.text == texts.CANCEL_OPERATION)
async def cancel_operation(message: Message, state: FSMContext) -> None:
    """Cancel any in-progress flow."""

    if not await _ensure_allowed_message(message):
        return
    await state.clear()
    await message.answer(texts.CANCELLED, reply_markup=main_menu_keyboard())


@router.message(F.text == texts.RATES)
async def show_rates(message: Message, stores: Stores) -> None:
    if not await _ensure_allowed_message(message):
        return
    await message.answer(rates_message(await stores.rates.current()))


@router.message(F.text == texts.CASHBOX)
async def show_cashbox(message: Message, stores: Stores) -> None:
    if not await _ensure_allowed_message(message):
        return
    await message.answer(cashbox_message(await stores.cashbox.read()))


@router.message(F.text == texts.SUMMARY)
async def show_summary(message: Message, reports: ReportService) -> None:
    if not await _ensure_allowed_message(message):
        return
    await message.answer(summary_message(await reports.dashboard()))


@router.message(F.text.in_(set(OPERATION_BUTTONS)))
async def start_operation(message: Message, state: FSMContext) -> None:
    """Remember the chosen pair and direction, then ask for the amount."""

    if not await _ensure_allowed_message(message):
        return
    pair, direction = OPERATION_BUTTONS[message.text]
    await state.clear()
    await state.update_data(pair=pair.value, type=direction.value)
    await state.set_state(SettleStates.waiting_amount)
    await message.answer(f"Monto en {pair.source.value}:")


@router.message(SettleStates.waiting_amount)
async def operation_amount(message: Message, state: FSMContext, engine: LedgerEngine) -> None:
    """Quote the entered amount and ask for confirmation."""

    if not await _ensure_allowed_message(message):
        return

    amount = parse_amount(message.text)
    if amount is None:
        await message.answer(texts.INVALID_AMOUNT)
        return
    if amount > engine.max_amount:
        await message.answer(f"El monto máximo por operación es {format_amount(engine.max_amount)}.")
        return

    data = await state.get_data()
    pair = CurrencyPair(data["pair"])
    direction = TransactionType(data["type"])
    quote = await engine.quote(pair, direction, amount)

    await state.update_data(amount=str(amount))
    await state.set_state(SettleStates.waiting_confirm)
    await message.answer(quote_message(pair, direction, amount, quote), reply_markup=confirm_keyboard())


@router.callback_query(F.data == "settle_cancel")
async def settle_cancel(callback: CallbackQuery, state: FSMContext) -> None:
    if not await _ensure_allowed_callback(callback):
        return
    await callback.message.edit_reply_markup(reply_markup=None)
    await state.clear()
    await callback.message.answer(texts.CANCELLED, reply_markup=main_menu_keyboard())
    await callback.answer()


@router.callback_query(SettleStates.waiting_confirm, F.data == "settle_confirm")
async def settle_confirm(
    callback: CallbackQuery,
    state: FSMContext,
    engine: LedgerEngine,
    stores: Stores,
    receipts: ReceiptService,
) -> None:
    """Settle at the rates current now and reply with the customer ticket."""

    if not await _ensure_allowed_callback(callback):
        return
    await callback.message.edit_reply_markup(reply_markup=None)

    data = await state.get_data()
    await state.clear()
    try:
        settlement = await engine.settle(
            CurrencyPair(data["pair"]),
            TransactionType(data["type"]),
            Decimal(data["amount"]),
        )
    except AppError as exc:
        logger.warning("Bot settlement rejected: %s", exc.message)
        await callback.message.answer(f"Error: {exc.message}", reply_markup=main_menu_keyboard())
        await callback.answer()
        return

    ticket = receipts.render_text(settlement.transaction, await stores.preferences.read())
    await callback.message.answer(ticket, reply_markup=main_menu_keyboard())
    await callback.answer()
