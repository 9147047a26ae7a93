"""Receipt delivery schemas."""

from pydantic import BaseModel


class ShareLink(BaseModel):
    """Prefilled chat message and the link that opens it."""

    message: str
    url: str


class EscPosPayload(BaseModel):
    """Raw printer bytes as base64-encoded writes, in order."""

    size: int
    chunks: list[str]
