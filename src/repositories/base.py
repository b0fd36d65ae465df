"""Callback repository capability — what every storage backend provides."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from src.repositories.csv_export import render_callbacks_csv
from src.schemas.callback import (
    CallbackRequest,
    CallbackStats,
    CallbackStatus,
    CallbackUpdate,
)

logger = structlog.get_logger()


def matches(
    record: CallbackRequest,
    status: Optional[CallbackStatus] = None,
    search: Optional[str] = None,
) -> bool:
    """Admin table filter: exact status, substring search over contact fields."""
    if status is not None and record.status != status:
        return False
    if search:
        needle = search.lower()
        haystack = (record.name, record.phone, record.email, record.comment)
        if not any(needle in (field or "").lower() for field in haystack):
            return False
    return True


def stored_status(value, callback_id) -> CallbackStatus:
    """Status read back from storage; values outside the enum fall back to ``new``.

    Older data may hold any string the admin API once accepted.
    """
    try:
        return CallbackStatus(value)
    except ValueError:
        logger.warning("callback_invalid_status", callback_id=callback_id, status=value)
        return CallbackStatus.NEW


def next_update_stamp(record: CallbackRequest) -> datetime:
    """Current time, nudged so it is strictly after ``date`` and the last update."""
    stamp = datetime.now(timezone.utc)
    floor = max(record.date, record.updated_at or record.date)
    if stamp <= floor:
        stamp = floor + timedelta(microseconds=1)
    return stamp


def apply_update(record: CallbackRequest, changes: CallbackUpdate) -> CallbackRequest:
    """Return a copy of ``record`` with status/note applied and ``updated_at`` stamped."""
    fields: dict = {"updated_at": next_update_stamp(record)}
    if changes.status is not None:
        fields["status"] = changes.status
    if changes.note_provided:
        fields["note"] = changes.note
    return record.model_copy(update=fields)


class CallbackRepository(ABC):
    """Stores callback requests. Listing is always newest first."""

    @abstractmethod
    async def append(self, record: CallbackRequest) -> CallbackRequest:
        """Add a new record. Raises PersistenceError if it cannot be stored."""

    @abstractmethod
    async def list_all(
        self,
        status: Optional[CallbackStatus] = None,
        search: Optional[str] = None,
    ) -> list[CallbackRequest]:
        """All records ordered by descending creation time, optionally filtered."""

    @abstractmethod
    async def get(self, callback_id: str) -> CallbackRequest:
        """Raises NotFound for an unknown id."""

    @abstractmethod
    async def update(self, callback_id: str, changes: CallbackUpdate) -> CallbackRequest:
        """Apply status/note, stamp ``updated_at``. Raises NotFound."""

    @abstractmethod
    async def delete(self, callback_id: str) -> CallbackRequest:
        """Remove and return the record. Raises NotFound."""

    @abstractmethod
    async def reload(self) -> None:
        """Drop in-memory state and re-read durable storage."""

    async def stats(self) -> CallbackStats:
        records = await self.list_all()
        counts = {status: 0 for status in CallbackStatus}
        for record in records:
            counts[record.status] += 1
        return CallbackStats(
            total=len(records),
            **{status.value: count for status, count in counts.items()},
        )

    async def export_csv(self, display_timezone: str = "Europe/Moscow") -> str:
        return render_callbacks_csv(await self.list_all(), display_timezone)
