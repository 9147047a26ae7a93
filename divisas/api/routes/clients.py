"""Client endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from divisas.api.deps import get_client_service
from divisas.schemas.client import Client, ClientCreate, ClientStats
from divisas.services.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=list[Client])
async def list_clients(
    search: Optional[str] = Query(default=None, max_length=128),
    service: ClientService = Depends(get_client_service),
) -> list[Client]:
    """List clients in registration order."""

    return await service.list_clients(search)


@router.post("", response_model=Client, status_code=201)
async def create_client(
    payload: ClientCreate,
    service: ClientService = Depends(get_client_service),
) -> Client:
    """Create a new client profile."""

    return await service.create_client(payload)


@router.get("/{client_id}", response_model=Client)
async def get_client(client_id: str, service: ClientService = Depends(get_client_service)) -> Client:
    return await service.get_client(client_id)


@router.put("/{client_id}", response_model=Client)
async def update_client(
    client_id: str,
    payload: ClientCreate,
    service: ClientService = Depends(get_client_service),
) -> Client:
    return await service.update_client(client_id, payload)


@router.delete("/{client_id}", status_code=204)
async def delete_client(client_id: str, service: ClientService = Depends(get_client_service)) -> Response:
    """Remove a client; their past transactions keep the recorded name."""

    await service.delete_client(client_id)
    return Response(status_code=204)


@router.get("/{client_id}/stats", response_model=ClientStats)
async def client_stats(client_id: str, service: ClientService = Depends(get_client_service)) -> ClientStats:
    return await service.client_stats(client_id)
