"""JSON file repository — the whole collection lives in one document.

Every mutation rewrites the full document. There is no locking: two
processes writing at once race and the later write wins.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError as SchemaError

from src.errors import NotFound, PersistenceError
from src.repositories.base import (
    CallbackRepository,
    apply_update,
    matches,
    stored_status,
)
from src.schemas.callback import CallbackRequest, CallbackStatus, CallbackUpdate

logger = structlog.get_logger()


def _with_known_status(item):
    if isinstance(item, dict) and "status" in item:
        return {**item, "status": stored_status(item["status"], item.get("id"))}
    return item


class JsonCallbackRepository(CallbackRepository):
    """Keeps one in-memory copy of the document, loaded lazily."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._records: Optional[list[CallbackRequest]] = None

    def ensure_document(self) -> None:
        """Create the data directory and an empty document if missing."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write([])
        except OSError as e:
            raise PersistenceError("failed to initialize callbacks storage") from e

    # ── Durable I/O ─────────────────────────────────────────────────

    def _read(self) -> list[CallbackRequest]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [
                CallbackRequest.model_validate(_with_known_status(item)) for item in raw
            ]
        except (OSError, ValueError, TypeError, SchemaError) as e:
            logger.error("callbacks_load_failed", path=str(self.path), error=str(e))
            raise PersistenceError("failed to read callbacks") from e

    def _write(self, records: list[CallbackRequest]) -> None:
        payload = json.dumps(
            [record.to_json() for record in records],
            ensure_ascii=False,
            indent=2,
        )
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=".callbacks-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            logger.error("callbacks_persist_failed", path=str(self.path), error=str(e))
            raise PersistenceError("failed to save callbacks") from e

    async def _load(self) -> list[CallbackRequest]:
        if self._records is None:
            self._records = await asyncio.to_thread(self._read)
        return self._records

    async def _commit(self, records: list[CallbackRequest]) -> None:
        """Persist first, then swap the cache, so a failed write changes nothing."""
        await asyncio.to_thread(self._write, records)
        self._records = records

    def _index_of(self, records: list[CallbackRequest], callback_id: str) -> int:
        for index, record in enumerate(records):
            if record.id == callback_id:
                return index
        raise NotFound("callback request not found")

    # ── Repository API ──────────────────────────────────────────────

    async def append(self, record: CallbackRequest) -> CallbackRequest:
        records = await self._load()
        await self._commit([*records, record])
        logger.info("callback_created", callback_id=record.id, total=len(records) + 1)
        return record

    async def list_all(
        self,
        status: Optional[CallbackStatus] = None,
        search: Optional[str] = None,
    ) -> list[CallbackRequest]:
        selected = [r for r in await self._load() if matches(r, status, search)]
        selected.sort(key=lambda r: r.date, reverse=True)
        return selected

    async def get(self, callback_id: str) -> CallbackRequest:
        records = await self._load()
        return records[self._index_of(records, callback_id)]

    async def update(self, callback_id: str, changes: CallbackUpdate) -> CallbackRequest:
        records = list(await self._load())
        index = self._index_of(records, callback_id)
        updated = apply_update(records[index], changes)
        records[index] = updated
        await self._commit(records)
        logger.info(
            "callback_updated",
            callback_id=callback_id,
            status=updated.status.value,
            note_changed=changes.note_provided,
        )
        return updated

    async def delete(self, callback_id: str) -> CallbackRequest:
        records = list(await self._load())
        index = self._index_of(records, callback_id)
        removed = records.pop(index)
        await self._commit(records)
        logger.info("callback_deleted", callback_id=callback_id, had_file=bool(removed.file))
        return removed

    async def reload(self) -> None:
        self._records = await asyncio.to_thread(self._read)
        logger.info("callbacks_reloaded", path=str(self.path), total=len(self._records))
