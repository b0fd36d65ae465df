"""Callback request table for the SQL storage backend."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class CallbackRecord(Base):
    __tablename__ = "callbacks"

    # Insertion order, used as a tie-breaker when dates are equal
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    # Contact
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(200), default="")
    product_type: Mapped[str] = mapped_column(String(200), default="")
    comment: Mapped[str] = mapped_column(Text, default="")

    # Attachment
    file: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)

    # Processing
    status: Mapped[str] = mapped_column(String(30), default="new")  # new|in_progress|completed|cancelled
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Stored as naive UTC; SQLite drops tzinfo anyway
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
