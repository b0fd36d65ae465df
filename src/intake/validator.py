"""Request validator — admits public form submissions and builds records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from src.attachments.manager import StoredAttachment
from src.errors import ValidationError
from src.schemas.callback import CallbackRequest, CallbackStatus, CallbackSubmission


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ""


def validate_submission(
    name: Optional[str],
    phone: Optional[str],
    email: Optional[str] = None,
    product_type: Optional[str] = None,
    comment: Optional[str] = None,
) -> CallbackSubmission:
    """Trim every field and require name and phone.

    Email and phone formats are not checked.

    Raises:
        ValidationError: name or phone is empty after trimming
    """
    submission = CallbackSubmission(
        name=_clean(name),
        phone=_clean(phone),
        email=_clean(email),
        product_type=_clean(product_type),
        comment=_clean(comment),
    )
    if not submission.name or not submission.phone:
        raise ValidationError("name and phone required")
    return submission


def build_record(
    submission: CallbackSubmission,
    attachment: Optional[StoredAttachment] = None,
) -> CallbackRequest:
    """Create a new record with a fresh id, creation time and status ``new``."""
    return CallbackRequest(
        id=uuid.uuid4().hex,
        name=submission.name,
        phone=submission.phone,
        email=submission.email,
        product_type=submission.product_type,
        comment=submission.comment,
        file=attachment.file if attachment else None,
        file_name=attachment.file_name if attachment else None,
        status=CallbackStatus.NEW,
        date=datetime.now(timezone.utc),
    )
