"""Operator authorization for the bot and the HTTP API."""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Optional
from urllib.parse import parse_qsl

from fastapi import Depends, Request

from divisas.api.errors import AppError
from divisas.config import Settings, get_settings


def parse_allowed_ids(raw: str) -> set[int]:
    """Parse comma-separated allowed Telegram IDs from config."""

    ids: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        try:
            ids.add(int(value))
        except ValueError:
            continue
    return ids


def is_bot_user_allowed(user_id: int, settings: Settings) -> bool:
    """Return whether bot user is allowed by configured whitelist."""

    allowed = parse_allowed_ids(settings.allowed_telegram_ids)
    if not allowed:
        return True
    return user_id in allowed


def verify_init_data(init_data: str, bot_token: str) -> Optional[int]:
    """Verify Telegram initData signature and return user ID."""

    if not init_data or not bot_token:
        return None

    parsed = dict(parse_qsl(init_data, keep_blank_values=True))
    hash_value = parsed.pop("hash", None)
    if not hash_value:
        return None

    data_check_string = "\n".join(f"{k}={v}" for k, v in sorted(parsed.items(), key=lambda item: item[0]))

    secret_key = hmac.new(b"WebAppData", bot_token.encode("utf-8"), hashlib.sha256).digest()
    calculated_hash = hmac.new(secret_key, data_check_string.encode("utf-8"), hashlib.sha256).hexdigest()

    if not hmac.compare_digest(calculated_hash, hash_value):
        return None

    user_raw = parsed.get("user")
    if not user_raw:
        return None
    try:
        user_id = json.loads(user_raw).get("id")
        return int(user_id) if user_id is not None else None
    except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
        return None


def _extract_telegram_id(request: Request, settings: Settings) -> Optional[int]:
    """Resolve Telegram user ID from signed initData, or the plain header in debug mode."""

    init_data = request.headers.get("X-Telegram-Init-Data")
    if init_data:
        return verify_init_data(init_data, settings.telegram_bot_token)

    if settings.debug:
        direct_id = request.headers.get("X-Telegram-Id")
        if direct_id:
            try:
                return int(direct_id)
            except ValueError:
                return None

    return None


async def require_api_auth(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Optional[int]:
    """Restrict the API to whitelisted operators; open when no whitelist is configured."""

    allowed = parse_allowed_ids(settings.allowed_telegram_ids)
    if not allowed:
        return None

    user_id = _extract_telegram_id(request, settings)
    if user_id is None:
        raise AppError("Operator authorization required", status_code=403)
    if user_id not in allowed:
        raise AppError("Access denied for this operator", status_code=403)
    return user_id
