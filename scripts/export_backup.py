"""Write a backup document of the local store to a JSON file."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from divisas.database.session import db_manager
from divisas.services.backup_service import BackupService
from divisas.storage.kv import KeyValueStore


async def export(target: Path) -> None:
    await db_manager.connect()
    try:
        document = await BackupService(KeyValueStore(db_manager.session_factory)).create_backup()
    finally:
        await db_manager.dispose()
    target.write_text(document.model_dump_json(indent=2), encoding="utf-8")
    print(f"Backup written to {target}")


if __name__ == "__main__":
    asyncio.run(export(Path(sys.argv[1] if len(sys.argv) > 1 else "divisas_backup.json")))
