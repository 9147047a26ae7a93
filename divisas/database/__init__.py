"""Database package exports."""

from divisas.database.base import Base
from divisas.database.models import StoredBlob

__all__ = ["Base", "StoredBlob"]
