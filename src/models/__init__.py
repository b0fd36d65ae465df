"""SQLAlchemy ORM models."""

from src.models.base import Base
from src.models.callback import CallbackRecord

__all__ = [
    "Base",
    "CallbackRecord",
]
