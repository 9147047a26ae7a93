"""Cash drawer endpoints."""

from fastapi import APIRouter, Depends

from divisas.api.deps import get_ledger_engine, get_stores
from divisas.ledger.engine import LedgerEngine
from divisas.schemas.cashbox import AdjustmentCreate, AdjustmentResponse, CashAdjustment, CashBox
from divisas.storage.repositories import Stores

router = APIRouter(prefix="/cashbox", tags=["cashbox"])


@router.get("", response_model=CashBox)
async def get_cashbox(stores: Stores = Depends(get_stores)) -> CashBox:
    return await stores.cashbox.read()


@router.get("/adjustments", response_model=list[CashAdjustment])
async def list_adjustments(stores: Stores = Depends(get_stores)) -> list[CashAdjustment]:
    """Manual movements, newest first."""

    return await stores.adjustments.read()


@router.post("/adjustments", response_model=AdjustmentResponse, status_code=201)
async def create_adjustment(
    payload: AdjustmentCreate,
    engine: LedgerEngine = Depends(get_ledger_engine),
) -> AdjustmentResponse:
    """Record a deposit, withdrawal or expense against the physical drawer."""

    result = await engine.adjust_cash(payload.type, payload.amount, payload.currency, payload.reason)
    return AdjustmentResponse(adjustment=result.adjustment, cashbox=result.cashbox)
