"""Thermal printer helper endpoints."""

from fastapi import APIRouter, Depends, Query

from divisas.api.deps import get_receipt_service
from divisas.schemas.receipt import EscPosPayload
from divisas.services.receipt_service import ReceiptService, encode_chunks

router = APIRouter(prefix="/printer", tags=["printer"])


@router.get("/test-page", response_model=EscPosPayload)
async def printer_test_page(
    chunk_size: int = Query(default=50, ge=1, le=512),
    receipts: ReceiptService = Depends(get_receipt_service),
) -> EscPosPayload:
    """Connection check page for a freshly paired printer."""

    payload = receipts.test_page()
    return EscPosPayload(
        size=len(payload),
        chunks=encode_chunks(payload, chunk_size),
    )
