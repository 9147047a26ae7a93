"""Backup, restore and factory reset endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from divisas.api.deps import get_backup_service
from divisas.schemas.backup import BackupDocument
from divisas.services.backup_service import BackupService

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("", response_model=BackupDocument)
async def export_backup(service: BackupService = Depends(get_backup_service)) -> BackupDocument:
    """Export every stored blob as one JSON document."""

    return await service.create_backup()


@router.post("/restore")
async def restore_backup(
    document: Any = Body(...),
    service: BackupService = Depends(get_backup_service),
) -> dict[str, str]:
    """Overwrite local data with a previously exported document."""

    await service.restore_backup(document)
    return {"status": "restored"}


@router.post("/reset")
async def reset_store(service: BackupService = Depends(get_backup_service)) -> dict[str, str]:
    await service.reset()
    return {"status": "reset"}
