"""Callback intake service — ties validator, attachments and repository together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog

from src.attachments.manager import AttachmentManager, StoredAttachment
from src.errors import PersistenceError
from src.intake.validator import build_record, validate_submission
from src.notifications.telegram import TelegramNotifier
from src.repositories.base import CallbackRepository
from src.schemas.callback import CallbackRequest

logger = structlog.get_logger()


@dataclass
class IncomingFile:
    """An uploaded file as received from the form."""

    content: bytes
    filename: str
    content_type: Optional[str] = None


class CallbackService:
    """Creates and deletes callback requests together with their attachments."""

    def __init__(
        self,
        repository: CallbackRepository,
        attachments: AttachmentManager,
        notifier: Optional[TelegramNotifier] = None,
    ):
        self.repository = repository
        self.attachments = attachments
        self.notifier = notifier

    async def submit(
        self,
        name: Optional[str],
        phone: Optional[str],
        email: Optional[str] = None,
        product_type: Optional[str] = None,
        comment: Optional[str] = None,
        upload: Optional[IncomingFile] = None,
    ) -> CallbackRequest:
        """Validate a public form submission and store it.

        The attachment is written only after the fields pass validation and
        is removed again if the record cannot be saved.
        """
        submission = validate_submission(name, phone, email, product_type, comment)

        stored: Optional[StoredAttachment] = None
        if upload is not None:
            stored = await self.attachments.store(
                upload.content, upload.filename, upload.content_type
            )

        record = build_record(submission, stored)
        try:
            await self.repository.append(record)
        except PersistenceError:
            if stored is not None:
                await self.attachments.delete(stored.file)
            raise

        logger.info(
            "callback_submitted",
            callback_id=record.id,
            product_type=record.product_type,
            has_file=stored is not None,
        )

        if self.notifier is not None:
            await self.notifier.send_callback_notification(record)

        return record

    async def delete(self, callback_id: str) -> CallbackRequest:
        """Delete a record and release its attachment.

        A failure to remove the file is logged; the record stays deleted.
        """
        removed = await self.repository.delete(callback_id)
        if removed.file:
            try:
                await self.attachments.delete(removed.file)
            except PersistenceError as e:
                logger.warning(
                    "attachment_cleanup_failed",
                    callback_id=callback_id,
                    file=removed.file,
                    error=str(e),
                )
        return removed
