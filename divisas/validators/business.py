"""Domain validation helpers."""

from decimal import Decimal
from typing import Optional

from divisas.api.errors import ValidationError


def ensure_positive_decimal(value: Decimal, field_name: str) -> None:
    """Validate that a decimal value is strictly positive."""

    if value <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")


def ensure_max_decimal(value: Decimal, ceiling: Decimal, field_name: str) -> None:
    """Validate that a decimal value does not exceed an inclusive ceiling."""

    if value > ceiling:
        raise ValidationError(f"{field_name} must not exceed {ceiling}")


def ensure_not_blank(value: Optional[str], field_name: str) -> str:
    """Validate that a text value has visible content and return it stripped."""

    stripped = (value or "").strip()
    if not stripped:
        raise ValidationError(f"{field_name} is required")
    return stripped
