"""Reply keyboard builders."""

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, KeyboardButton, ReplyKeyboardMarkup

from divisas.bot import texts
from divisas.schemas.currency import CurrencyPair
from divisas.schemas.transaction import TransactionType

# Menu button -> operation it starts
OPERATION_BUTTONS: dict[str, tuple[CurrencyPair, TransactionType]] = {
    texts.BUY_USD: (CurrencyPair.USD_DOP, TransactionType.BUY),
    texts.SELL_USD: (CurrencyPair.USD_DOP, TransactionType.SELL),
    texts.BUY_EUR: (CurrencyPair.EUR_DOP, TransactionType.BUY),
    texts.SELL_EUR: (CurrencyPair.EUR_DOP, TransactionType.SELL),
}


def main_menu_keyboard() -> ReplyKeyboardMarkup:
    """Main menu keyboard with operator actions."""

    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=texts.BUY_USD), KeyboardButton(text=texts.SELL_USD)],
            [KeyboardButton(text=texts.BUY_EUR), KeyboardButton(text=texts.SELL_EUR)],
            [KeyboardButton(text=texts.RATES), KeyboardButton(text=texts.CASHBOX)],
            [KeyboardButton(text=texts.SUMMARY), KeyboardButton(text=texts.CANCEL_OPERATION)],
        ],
        resize_keyboard=True,
    )


def confirm_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=texts.CONFIRM, callback_data="settle_confirm")],
            [InlineKeyboardButton(text=texts.REJECT, callback_data="settle_cancel")],
        ]
    )
