"""Callback request schemas — the stored record and the admin payloads."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CallbackStatus(str, Enum):
    """Lifecycle states an administrator assigns to a callback request."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CallbackSubmission(BaseModel):
    """Normalized public form fields, ready to become a record."""

    name: str
    phone: str
    email: str = ""
    product_type: str = ""
    comment: str = ""


class CallbackRequest(BaseModel):
    """A stored callback request.

    Serialized with camelCase keys (``productType``, ``fileName``,
    ``updatedAt``) both on the wire and in the JSON document.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    phone: str
    email: str = ""
    product_type: str = ""
    comment: str = ""
    file: Optional[str] = None
    file_name: Optional[str] = None
    status: CallbackStatus = CallbackStatus.NEW
    note: Optional[str] = None
    date: datetime
    updated_at: Optional[datetime] = None

    @field_validator("date", "updated_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _file_pair(self) -> "CallbackRequest":
        if (self.file is None) != (self.file_name is None):
            raise ValueError("file and fileName must be set together")
        return self

    def to_json(self) -> dict:
        """Dump for API responses and storage; unset note/updatedAt are omitted."""
        exclude = {f for f in ("note", "updated_at") if getattr(self, f) is None}
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


class CallbackUpdate(BaseModel):
    """Admin edit payload: ``{status?, note?}``.

    ``note`` may be sent as ``""`` or ``null`` to clear it; a note that is
    not sent at all is left untouched. Check ``note_provided``.
    """

    status: Optional[CallbackStatus] = None
    note: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _blank_status(cls, value):
        if value == "":
            return None
        return value

    @property
    def note_provided(self) -> bool:
        return "note" in self.model_fields_set


class CallbackStats(BaseModel):
    """Per-status counters for the admin dashboard."""

    total: int = 0
    new: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
