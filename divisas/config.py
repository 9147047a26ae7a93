"""Application settings loaded from environment variables."""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Divisas Desk"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    database_url: str = Field(
        default="sqlite+aiosqlite:///./divisas.db",
        description="Async SQLAlchemy URL for the local key-value store",
    )

    timezone: str = "America/Santo_Domingo"

    walk_in_client_id: str = "WALK_IN"
    walk_in_client_name: str = "Cliente Ocasional"
    max_transaction_amount: Decimal = Decimal("1000000")

    market_rates_enabled: bool = True
    market_rates_url: str = "https://api.exchangerate-api.com/v4/latest"
    market_rates_poll_seconds: int = 300
    market_rates_timeout_seconds: float = 10.0

    ai_api_key: Optional[str] = None
    ai_model: str = "gpt-4o-mini"
    ai_base_url: Optional[str] = None

    telegram_bot_token: str = ""
    allowed_telegram_ids: str = ""

    receipt_width: int = 32


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance for dependency injection."""

    return Settings()
