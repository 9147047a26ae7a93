"""Operator preferences schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from divisas.schemas.common import CamelSchema
from divisas.schemas.rates import RatesUpdate

PREFERENCES_VERSION = 5

DEFAULT_DASHBOARD_LAYOUT = ["quick", "stats", "rates", "cashbox", "clients", "chart"]


class PrinterConfig(CamelSchema):
    """Last paired thermal printer."""

    device_id: Optional[str] = None
    device_name: Optional[str] = None
    service_id: Optional[str] = None
    characteristic_id: Optional[str] = None


class UserPreferences(CamelSchema):
    """Business profile and device preferences; every field has a default."""

    is_setup_completed: bool = False
    user_name: str = ""
    business_name: str = ""
    slogan: str = ""
    dark_mode: bool = False
    printer: PrinterConfig = Field(default_factory=PrinterConfig)
    dashboard_layout: list[str] = Field(default_factory=lambda: list(DEFAULT_DASHBOARD_LAYOUT))


class SetupRequest(CamelSchema):
    """Onboarding payload: who runs the desk and the opening rate sheet."""

    user_name: str = Field(min_length=1, max_length=64)
    business_name: str = Field(min_length=1, max_length=128)
    slogan: str = Field(default="Servicios Financieros", max_length=128)
    dark_mode: bool = False
    rates: Optional[RatesUpdate] = None
