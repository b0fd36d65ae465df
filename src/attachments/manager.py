"""Attachment manager — local storage for files uploaded with a callback request.

Stored files live flat in the uploads directory under a generated name
``<epoch-millis>-<random><ext>`` and are referenced from records as
``/uploads/<name>``.
"""

from __future__ import annotations

import asyncio
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog

from src.errors import PayloadTooLarge, PersistenceError, UnsupportedMediaType

logger = structlog.get_logger()

PUBLIC_PREFIX = "/uploads/"
MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024  # 10 MiB

ALLOWED_CONTENT_TYPES = {
    ".jpeg": {"image/jpeg", "image/pjpeg"},
    ".jpg": {"image/jpeg", "image/pjpeg"},
    ".png": {"image/png"},
    ".gif": {"image/gif"},
    ".pdf": {"application/pdf"},
    ".doc": {"application/msword"},
    ".docx": {
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    },
    ".dwg": {"image/vnd.dwg", "image/x-dwg", "application/acad", "application/dwg"},
    ".dxf": {"image/vnd.dxf", "image/x-dxf", "application/dxf"},
}

# Browsers send these when they cannot tell the type; the extension decides.
GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}


@dataclass
class StoredAttachment:
    """Reference to a stored upload, as kept on the record."""

    file: str
    file_name: str
    size: int


class AttachmentManager:
    """Checks, stores and removes callback attachments on local disk."""

    def __init__(self, uploads_dir: Path, max_bytes: int = MAX_ATTACHMENT_BYTES):
        self._uploads_dir = Path(uploads_dir)
        self._uploads_dir.mkdir(parents=True, exist_ok=True)
        self.max_bytes = max_bytes

    @property
    def uploads_dir(self) -> Path:
        return self._uploads_dir

    def check(self, filename: str, content_type: Optional[str], size: int) -> str:
        """Validate an upload and return its lowercased extension.

        Raises:
            UnsupportedMediaType: extension or declared type not allowed
            PayloadTooLarge: more than ``max_bytes`` bytes
        """
        ext = Path(filename or "").suffix.lower()
        allowed_types = ALLOWED_CONTENT_TYPES.get(ext)
        if allowed_types is None:
            logger.warning("attachment_rejected", reason="extension", filename=filename)
            raise UnsupportedMediaType("unsupported file type")

        declared = (content_type or "").split(";")[0].strip().lower()
        if declared not in GENERIC_CONTENT_TYPES and declared not in allowed_types:
            logger.warning(
                "attachment_rejected",
                reason="content_type",
                filename=filename,
                content_type=declared,
            )
            raise UnsupportedMediaType("unsupported file type")

        if size > self.max_bytes:
            logger.warning("attachment_rejected", reason="size", filename=filename, size=size)
            raise PayloadTooLarge("file exceeds the 10 MB limit")

        return ext

    async def store(
        self, content: bytes, filename: str, content_type: Optional[str] = None
    ) -> StoredAttachment:
        """Store an uploaded file under a generated collision-resistant name."""
        ext = self.check(filename, content_type, len(content))

        stored_name = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"
        dest_path = self._uploads_dir / stored_name
        try:
            await asyncio.to_thread(dest_path.write_bytes, content)
        except OSError as e:
            logger.error("attachment_store_failed", path=str(dest_path), error=str(e))
            raise PersistenceError("failed to store attachment") from e

        logger.info(
            "attachment_stored",
            stored_name=stored_name,
            original=filename,
            size=len(content),
        )
        return StoredAttachment(
            file=PUBLIC_PREFIX + stored_name,
            file_name=filename,
            size=len(content),
        )

    def path_for(self, reference: str) -> Path:
        """Map a ``/uploads/<name>`` reference to its file inside the uploads dir."""
        return self._uploads_dir / Path(reference).name

    async def delete(self, reference: str) -> bool:
        """Remove a stored file. A file that is already gone is not an error.

        Returns True if a file was removed.
        """
        file_path = self.path_for(reference)
        if not await asyncio.to_thread(file_path.is_file):
            logger.info("attachment_already_missing", reference=reference)
            return False

        try:
            await asyncio.to_thread(file_path.unlink, missing_ok=True)
        except OSError as e:
            logger.error("attachment_delete_failed", path=str(file_path), error=str(e))
            raise PersistenceError("failed to delete attachment") from e

        logger.info("attachment_deleted", reference=reference)
        return True
