"""Telegram bot application entrypoint."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage

from divisas.bootstrap import build_ledger, configure_logging
from divisas.bot.handlers.main import router as main_router
from divisas.config import get_settings
from divisas.database.session import db_manager
from divisas.services.receipt_service import ReceiptService
from divisas.services.report_service import ReportService

logger = logging.getLogger(__name__)


async def run_bot() -> None:
    """Run polling bot process."""

    settings = get_settings()
    configure_logging(settings)
    if not settings.telegram_bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured")

    await db_manager.connect()
    _kv_store, stores, engine = build_ledger(db_manager.session_factory, settings)

    bot = Bot(token=settings.telegram_bot_token)
    # Extra keyword arguments become handler dependencies by name.
    dispatcher = Dispatcher(
        storage=MemoryStorage(),
        engine=engine,
        stores=stores,
        receipts=ReceiptService(settings.timezone, width=settings.receipt_width),
        reports=ReportService(stores.transactions, stores.clients, settings.timezone),
    )
    dispatcher.include_router(main_router)

    logger.info("Bot polling started")
    try:
        await dispatcher.start_polling(bot)
    finally:
        await bot.session.close()
        await db_manager.dispose()


if __name__ == "__main__":
    asyncio.run(run_bot())
