"""Callback requests API — public form intake and admin management."""

from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response

from src.attachments.manager import AttachmentManager
from src.config import settings
from src.dependencies import get_attachments, get_callback_service, get_repository
from src.intake.service import CallbackService, IncomingFile
from src.repositories.base import CallbackRepository
from src.schemas.callback import CallbackStatus, CallbackUpdate

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["callbacks"])


@router.post("/callback")
async def submit_callback(
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    product_type: Optional[str] = Form(None, alias="productType"),
    comment: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    service: CallbackService = Depends(get_callback_service),
    attachments: AttachmentManager = Depends(get_attachments),
) -> dict:
    """Accept the public "request a callback" form with an optional file."""
    upload = None
    if file is not None and file.filename:
        # One byte over the limit is enough to reject it
        content = await file.read(attachments.max_bytes + 1)
        upload = IncomingFile(
            content=content,
            filename=file.filename,
            content_type=file.content_type,
        )

    record = await service.submit(
        name=name,
        phone=phone,
        email=email,
        product_type=product_type,
        comment=comment,
        upload=upload,
    )
    return {
        "success": True,
        "message": "Request submitted successfully",
        "id": record.id,
    }


@router.get("/callbacks")
async def list_callbacks(
    status: Optional[CallbackStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Name, phone, email or comment"),
    repository: CallbackRepository = Depends(get_repository),
) -> dict:
    """List callback requests, newest first."""
    records = await repository.list_all(status=status, search=search)
    return {"success": True, "data": [record.to_json() for record in records]}


@router.get("/callbacks/stats")
async def callback_stats(
    repository: CallbackRepository = Depends(get_repository),
) -> dict:
    """Counters per status for the admin dashboard."""
    stats = await repository.stats()
    return {"success": True, "data": stats.model_dump()}


@router.get("/callbacks/export/csv")
async def export_callbacks_csv(
    repository: CallbackRepository = Depends(get_repository),
) -> Response:
    """Download every callback request as a spreadsheet-friendly CSV."""
    document = await repository.export_csv(settings.display_timezone)
    filename = f"callbacks-{datetime.now(timezone.utc).date().isoformat()}.csv"
    logger.info("callbacks_exported", filename=filename)
    return Response(
        content=document.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/callbacks/{callback_id}")
async def get_callback(
    callback_id: str,
    repository: CallbackRepository = Depends(get_repository),
) -> dict:
    record = await repository.get(callback_id)
    return {"success": True, "data": record.to_json()}


@router.put("/callbacks/{callback_id}")
async def update_callback(
    callback_id: str,
    changes: CallbackUpdate,
    repository: CallbackRepository = Depends(get_repository),
) -> dict:
    """Change status and/or admin note."""
    record = await repository.update(callback_id, changes)
    return {"success": True, "data": record.to_json()}


@router.delete("/callbacks/{callback_id}")
async def delete_callback(
    callback_id: str,
    service: CallbackService = Depends(get_callback_service),
) -> dict:
    """Delete a request together with its attachment."""
    await service.delete(callback_id)
    return {"success": True, "message": "Request deleted"}
