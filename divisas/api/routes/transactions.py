"""Exchange operation endpoints: quote, settle, history and receipts."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from divisas.api.deps import get_ledger_engine, get_receipt_service, get_stores, get_transaction_query_service
from divisas.ledger.engine import LedgerEngine
from divisas.schemas.receipt import EscPosPayload, ShareLink
from divisas.schemas.transaction import (
    Quote,
    QuoteRequest,
    SettleRequest,
    SettlementResponse,
    Transaction,
    TransactionListResponse,
)
from divisas.services.receipt_service import ReceiptService, encode_chunks
from divisas.services.transaction_service import TransactionQueryService
from divisas.storage.repositories import Stores

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("/quote", response_model=Quote)
async def quote_transaction(
    payload: QuoteRequest,
    engine: LedgerEngine = Depends(get_ledger_engine),
) -> Quote:
    """Price an operation at the current rates without recording it."""

    return await engine.quote(payload.pair, payload.type, payload.amount)


@router.post("", response_model=SettlementResponse, status_code=201)
async def settle_transaction(
    payload: SettleRequest,
    engine: LedgerEngine = Depends(get_ledger_engine),
) -> SettlementResponse:
    """Record an operation and move the cash drawer."""

    settlement = await engine.settle(
        payload.pair,
        payload.type,
        payload.amount,
        client_id=payload.client_id,
        note=payload.note,
    )
    return SettlementResponse(transaction=settlement.transaction, cashbox=settlement.cashbox)


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    search: Optional[str] = Query(default=None, max_length=128),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=500),
    service: TransactionQueryService = Depends(get_transaction_query_service),
) -> TransactionListResponse:
    total, items = await service.search(query=search, offset=offset, limit=limit)
    return TransactionListResponse(total=total, items=items)


@router.get("/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    service: TransactionQueryService = Depends(get_transaction_query_service),
) -> Transaction:
    return await service.get(transaction_id)


@router.get("/{transaction_id}/receipt", response_class=PlainTextResponse)
async def transaction_receipt(
    transaction_id: str,
    service: TransactionQueryService = Depends(get_transaction_query_service),
    receipts: ReceiptService = Depends(get_receipt_service),
    stores: Stores = Depends(get_stores),
) -> str:
    """Plain-text customer ticket."""

    tx = await service.get(transaction_id)
    return receipts.render_text(tx, await stores.preferences.read())


@router.get("/{transaction_id}/share", response_model=ShareLink)
async def transaction_share_link(
    transaction_id: str,
    service: TransactionQueryService = Depends(get_transaction_query_service),
    receipts: ReceiptService = Depends(get_receipt_service),
    stores: Stores = Depends(get_stores),
) -> ShareLink:
    tx = await service.get(transaction_id)
    preferences = await stores.preferences.read()
    return ShareLink(
        message=receipts.share_message(tx, preferences),
        url=receipts.share_url(tx, preferences),
    )


@router.get("/{transaction_id}/escpos", response_model=EscPosPayload)
async def transaction_escpos(
    transaction_id: str,
    chunk_size: int = Query(default=50, ge=1, le=512),
    service: TransactionQueryService = Depends(get_transaction_query_service),
    receipts: ReceiptService = Depends(get_receipt_service),
    stores: Stores = Depends(get_stores),
) -> EscPosPayload:
    """ESC/POS ticket split into printer-sized base64 writes."""

    tx = await service.get(transaction_id)
    payload = receipts.render_escpos(tx, await stores.preferences.read())
    return EscPosPayload(
        size=len(payload),
        chunks=encode_chunks(payload, chunk_size),
    )
