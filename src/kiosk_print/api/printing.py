"""Print job endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from kiosk_print.api.files import public_base_url
from kiosk_print.api.request_models import PrintRequest
from kiosk_print.services.validation import parse_uuid

if TYPE_CHECKING:
    from kiosk_print.containers import AppContainer

router = APIRouter(prefix="/api", tags=["printing"])


@router.post("/print")
async def request_print(body: PrintRequest, request: Request) -> dict[str, object]:
    """Send a print job to the kiosk's live channel."""
    container: AppContainer = request.app.state.container
    result = await container.print_flow_service.request_print(
        kiosk_id=body.kiosk_id.strip(),
        file_id=parse_uuid(body.file_id, "fileId"),
        base_url=public_base_url(request),
        color=body.color,
        copies=body.copies,
        page_range=body.page_range,
        user_id=parse_uuid(body.user_id, "userId") if body.user_id else None,
    )
    job = result.payload.model_dump(by_alias=True, mode="json")
    job["status"] = result.job.status.value
    return {"success": True, "message": "Print job sent", "job": job}


@router.get("/print/{job_id}")
def get_print_job(job_id: str, request: Request) -> dict[str, object]:
    """Return the server-side status of a print job."""
    container: AppContainer = request.app.state.container
    job = container.print_flow_service.get_job(parse_uuid(job_id, "jobId"))
    return {"success": True, "job": job.view()}
