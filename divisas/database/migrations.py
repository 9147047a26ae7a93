"""Helpers to run Alembic migrations programmatically."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config

from divisas.config import get_settings

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"


def alembic_config(database_url: Optional[str] = None) -> Config:
    """Alembic config pointed at ``database_url`` or the configured store."""

    cfg = Config(str(ALEMBIC_INI))
    cfg.set_main_option("sqlalchemy.url", database_url or get_settings().database_url)
    return cfg


def should_run_migrations() -> bool:
    """Only when ``RUN_MIGRATIONS_ON_STARTUP`` is true; ``connect`` creates the table otherwise."""

    return os.getenv("RUN_MIGRATIONS_ON_STARTUP", "false").strip().lower() in {"1", "true", "yes"}


async def run_migrations(database_url: Optional[str] = None) -> None:
    """Upgrade the store to the latest revision."""

    cfg = alembic_config(database_url)
    logger.info("Applying migrations")
    # Alembic is synchronous.
    await asyncio.to_thread(command.upgrade, cfg, "head")
