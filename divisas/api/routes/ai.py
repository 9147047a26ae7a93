"""AI analysis endpoints."""

from fastapi import APIRouter, Depends

from divisas.ai.analysis_service import DayAnalysisService
from divisas.api.deps import get_analysis_service, get_stores
from divisas.schemas.ai import DayAnalysisResponse
from divisas.storage.repositories import Stores

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/analyze-day", response_model=DayAnalysisResponse)
async def analyze_day(
    stores: Stores = Depends(get_stores),
    service: DayAnalysisService = Depends(get_analysis_service),
) -> DayAnalysisResponse:
    """Short commentary on today's operations."""

    return await service.analyze(await stores.transactions.read())
