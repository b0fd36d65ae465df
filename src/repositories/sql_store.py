"""SQL repository — callback requests in a relational table (SQLite by default)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.errors import NotFound, PersistenceError
from src.models.callback import CallbackRecord
from src.repositories.base import (
    CallbackRepository,
    apply_update,
    matches,
    stored_status,
)
from src.schemas.callback import CallbackRequest, CallbackStatus, CallbackUpdate

logger = structlog.get_logger()


def _to_db_time(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db_time(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def _to_schema(row: CallbackRecord) -> CallbackRequest:
    return CallbackRequest(
        id=row.id,
        name=row.name,
        phone=row.phone,
        email=row.email or "",
        product_type=row.product_type or "",
        comment=row.comment or "",
        file=row.file,
        file_name=row.file_name,
        status=stored_status(row.status, row.id),
        note=row.note,
        date=_from_db_time(row.date),
        updated_at=_from_db_time(row.updated_at),
    )


class SqlCallbackRepository(CallbackRepository):
    """No in-memory state; every call runs in its own session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _fetch(self, db: AsyncSession, callback_id: str) -> CallbackRecord:
        result = await db.execute(
            select(CallbackRecord).where(CallbackRecord.id == callback_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFound("callback request not found")
        return row

    async def append(self, record: CallbackRequest) -> CallbackRequest:
        try:
            async with self.session_factory() as db:
                db.add(CallbackRecord(
                    id=record.id,
                    name=record.name,
                    phone=record.phone,
                    email=record.email,
                    product_type=record.product_type,
                    comment=record.comment,
                    file=record.file,
                    file_name=record.file_name,
                    status=record.status.value,
                    note=record.note,
                    date=_to_db_time(record.date),
                    updated_at=_to_db_time(record.updated_at),
                ))
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("callbacks_persist_failed", error=str(e))
            raise PersistenceError("failed to save callbacks") from e

        logger.info("callback_created", callback_id=record.id)
        return record

    async def list_all(
        self,
        status: Optional[CallbackStatus] = None,
        search: Optional[str] = None,
    ) -> list[CallbackRequest]:
        stmt = select(CallbackRecord)
        if status is not None:
            stmt = stmt.where(CallbackRecord.status == status.value)
        stmt = stmt.order_by(CallbackRecord.date.desc(), CallbackRecord.seq.asc())

        try:
            async with self.session_factory() as db:
                rows = (await db.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            logger.error("callbacks_load_failed", error=str(e))
            raise PersistenceError("failed to read callbacks") from e

        records = [_to_schema(row) for row in rows]
        # SQLite lower() is ASCII-only, so search runs here for Cyrillic input
        if search:
            records = [r for r in records if matches(r, search=search)]
        return records

    async def get(self, callback_id: str) -> CallbackRequest:
        try:
            async with self.session_factory() as db:
                return _to_schema(await self._fetch(db, callback_id))
        except SQLAlchemyError as e:
            logger.error("callbacks_load_failed", error=str(e))
            raise PersistenceError("failed to read callbacks") from e

    async def update(self, callback_id: str, changes: CallbackUpdate) -> CallbackRequest:
        try:
            async with self.session_factory() as db:
                row = await self._fetch(db, callback_id)
                updated = apply_update(_to_schema(row), changes)
                row.status = updated.status.value
                row.note = updated.note
                row.updated_at = _to_db_time(updated.updated_at)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("callbacks_persist_failed", callback_id=callback_id, error=str(e))
            raise PersistenceError("failed to save callbacks") from e

        logger.info(
            "callback_updated",
            callback_id=callback_id,
            status=updated.status.value,
            note_changed=changes.note_provided,
        )
        return updated

    async def delete(self, callback_id: str) -> CallbackRequest:
        try:
            async with self.session_factory() as db:
                row = await self._fetch(db, callback_id)
                removed = _to_schema(row)
                await db.delete(row)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("callbacks_persist_failed", callback_id=callback_id, error=str(e))
            raise PersistenceError("failed to save callbacks") from e

        logger.info("callback_deleted", callback_id=callback_id, had_file=bool(removed.file))
        return removed

    async def reload(self) -> None:
        # Nothing cached between calls
        logger.debug("callbacks_reload_noop")
