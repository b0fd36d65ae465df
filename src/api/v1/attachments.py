"""Serves stored attachments at the public ``/uploads/<name>`` references."""

import mimetypes

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from src.attachments.manager import AttachmentManager
from src.dependencies import get_attachments
from src.errors import NotFound

router = APIRouter(tags=["attachments"])


@router.get("/uploads/{stored_name}")
async def download_attachment(
    stored_name: str,
    attachments: AttachmentManager = Depends(get_attachments),
) -> FileResponse:
    file_path = attachments.path_for(stored_name)
    if not file_path.is_file():
        raise NotFound("file not found")

    return FileResponse(
        path=str(file_path),
        media_type=mimetypes.guess_type(file_path.name)[0] or "application/octet-stream",
    )
