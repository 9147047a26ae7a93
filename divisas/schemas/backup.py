"""Backup document schemas."""

from typing import Any

from pydantic import BaseModel

BACKUP_VERSION = 5


class BackupDocument(BaseModel):
    """Bundled export of every stored blob."""

    version: int = BACKUP_VERSION
    timestamp: int
    data: dict[str, Any]
