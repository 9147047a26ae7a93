"""Test doubles shared across test modules."""

from __future__ import annotations

import copy
from typing import Any

from divisas.api.errors import StorageError

# 2026-03-10 14:30 in Santo Domingo (UTC-4)
FIXED_NOW_MS = 1773167400000


class MemoryBlobStore:
    """In-memory key-value double; keys in ``fail_on`` raise on write."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.fail_on: set[str] = set()

    async def get(self, key: str, default: Any) -> Any:
        if key not in self.data:
            return default
        return copy.deepcopy(self.data[key])

    async def set(self, key: str, value: Any) -> None:
        if key in self.fail_on:
            raise StorageError(f"Failed to persist key {key}")
        self.data[key] = copy.deepcopy(value)
