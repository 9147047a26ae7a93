"""Client schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from divisas.schemas.common import CamelSchema


class Client(CamelSchema):
    """Registered counterparty."""

    id: str
    name: str
    phone: str = ""
    cedula: Optional[str] = None
    notes: Optional[str] = None
    created_at: int


class ClientCreate(BaseModel):
    """Create/update payload for a client."""

    name: str = Field(min_length=1, max_length=128)
    phone: str = Field(default="", max_length=32)
    cedula: Optional[str] = Field(default=None, max_length=32)
    notes: Optional[str] = Field(default=None, max_length=512)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, value: str) -> str:
        return value.strip()

    @field_validator("cedula", "notes")
    @classmethod
    def normalize_optional(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


class ClientStats(CamelSchema):
    """Activity summary of one client."""

    client_id: str
    transaction_count: int
    total_volume: Decimal
