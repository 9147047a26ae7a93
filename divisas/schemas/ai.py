"""AI analysis schemas."""

from pydantic import BaseModel


class DayAnalysisResponse(BaseModel):
    """Short plain-text commentary on today's operations."""

    message: str
    transaction_count: int
