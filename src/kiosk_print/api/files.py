"""Upload, listing and download endpoints."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING
from urllib.parse import quote

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from kiosk_print.domain.files import MAX_COPIES, MIN_COPIES, ColorMode
from kiosk_print.services.errors import ValidationError
from kiosk_print.services.validation import parse_uuid

if TYPE_CHECKING:
    from kiosk_print.containers import AppContainer

router = APIRouter(prefix="/api", tags=["files"])


def public_base_url(request: Request) -> str:
    """Return the base URL clients should use to reach this service."""
    container: AppContainer = request.app.state.container
    return container.settings.public_base_url or str(request.base_url)


@router.post("/upload")
async def upload_file(  # noqa: PLR0913
    request: Request,
    file: UploadFile | None = File(default=None),
    user_id: str | None = Form(default=None, alias="userId"),
    kiosk_id: str | None = Form(default=None, alias="kioskId"),
    color: ColorMode = Form(default=ColorMode.BLACK_WHITE),
    copies: int = Form(default=MIN_COPIES, ge=MIN_COPIES, le=MAX_COPIES),
) -> dict[str, object]:
    """Store an uploaded file and notify the kiosk room."""
    container: AppContainer = request.app.state.container
    if file is None:
        raise ValidationError("No file uploaded")
    owner_id = parse_uuid(user_id, "userId")
    data = await file.read()
    result = await container.print_flow_service.upload(
        owner_id=owner_id,
        filename=file.filename,
        content_type=file.content_type,
        data=data,
        base_url=public_base_url(request),
        kiosk_id=kiosk_id.strip() if kiosk_id else None,
        color=color,
        copies=copies,
    )
    return {
        "success": True,
        "fileId": str(result.record.id),
        "filename": result.record.filename,
        "url": result.url,
        "size": result.record.size,
    }


@router.get("/files/{user_id}")
def list_files(user_id: str, request: Request) -> dict[str, object]:
    """Return a user's uploads, newest first."""
    container: AppContainer = request.app.state.container
    records = container.content_service.list_for_owner(parse_uuid(user_id, "userId"))
    return {"success": True, "files": [record.listing_view() for record in records]}


@router.get("/file/{file_id}")
async def download_file(file_id: str, request: Request) -> StreamingResponse:
    """Stream the stored bytes of a file."""
    container: AppContainer = request.app.state.container
    record = await run_in_threadpool(
        container.content_service.get, parse_uuid(file_id, "fileId")
    )
    data = await container.content_service.read(record)
    return StreamingResponse(
        io.BytesIO(data),
        media_type=record.content_type,
        headers={"Content-Disposition": _content_disposition(record.filename)},
    )


def _content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "ignore").decode("ascii") or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
