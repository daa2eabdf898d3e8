"""Upload-to-print flow between user devices and kiosks.

A kiosk registers its channel (``attach_kiosk``); uploads are announced to
the kiosk's room; print requests are sent straight to the kiosk's
registered channel. Once the kiosk channel has been handed a print event
the job counts as dispatched. Nothing confirms that paper came out.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from fastapi.concurrency import run_in_threadpool

from kiosk_print.domain.events import (
    FileReadyPayload,
    PrintRequestedPayload,
    RelayEvent,
)
from kiosk_print.domain.files import ColorMode, StoredFileRecord
from kiosk_print.domain.jobs import JobStatus, PrintJobRecord
from kiosk_print.services.content import ContentService
from kiosk_print.services.errors import (
    KioskOfflineError,
    NotFoundError,
    ValidationError,
)
from kiosk_print.services.identity import IdentityService
from kiosk_print.services.relay import RelayHub
from kiosk_print.services.sessions import ChannelHandle, SessionRegistry

logger = logging.getLogger(__name__)


class PrintJobRepository(Protocol):
    """Persistence interface for print jobs."""

    def create_job(self, record: PrintJobRecord) -> PrintJobRecord:
        """Persist a new print job and return it."""

    def get_job(self, job_id: UUID) -> PrintJobRecord | None:
        """Return a print job by id, if present."""

    def update_status(self, job_id: UUID, status: JobStatus) -> None:
        """Set the status of a print job."""

    def delete_job(self, job_id: UUID) -> None:
        """Remove a print job that never reached its kiosk."""


@dataclass(frozen=True)
class UploadResult:
    record: StoredFileRecord
    url: str
    announced_to: int


@dataclass(frozen=True)
class PrintResult:
    job: PrintJobRecord
    payload: PrintRequestedPayload


@dataclass
class PrintFlowService:
    """Coordinates uploads, kiosk sessions and print dispatch."""

    content_service: ContentService
    identity_service: IdentityService
    registry: SessionRegistry
    hub: RelayHub
    job_repository: PrintJobRepository

    def attach_kiosk(self, kiosk_id: str, handle: ChannelHandle) -> None:
        """Register a kiosk channel and join it to the kiosk's room."""
        if not kiosk_id:
            return
        self.registry.register_kiosk(kiosk_id, handle)
        self.hub.join(handle, kiosk_id)
        if not self.hub.is_subscribed(handle, RelayEvent.PRINT_REQUESTED):
            self.hub.on_event(handle, RelayEvent.PRINT_REQUESTED, self._mark_dispatched)

    def detach_channel(self, kiosk_ids: set[str], handle: ChannelHandle) -> None:
        """Forget a closed channel without evicting newer kiosk sessions."""
        for kiosk_id in kiosk_ids:
            self.registry.unregister_if_owner(kiosk_id, handle)
        self.hub.leave_all(handle)

    async def upload(  # noqa: PLR0913
        self,
        owner_id: UUID,
        filename: str | None,
        content_type: str | None,
        data: bytes,
        base_url: str,
        kiosk_id: str | None = None,
        color: ColorMode = ColorMode.BLACK_WHITE,
        copies: int = 1,
    ) -> UploadResult:
        """Store an upload and announce it to the kiosk room."""
        record = await self.content_service.store(
            owner_id=owner_id,
            filename=filename,
            content_type=content_type,
            data=data,
            kiosk_id=kiosk_id,
            color=color,
            copies=copies,
        )
        url = self.content_service.download_url(record, base_url)
        announced = 0
        if record.kiosk_id:
            announced = await self.hub.publish(
                record.kiosk_id,
                RelayEvent.FILE_READY,
                FileReadyPayload(
                    file_id=str(record.id),
                    filename=record.filename,
                    url=url,
                    size=record.size,
                    content_type=record.content_type,
                    user_id=str(record.owner_id),
                ),
            )
        return UploadResult(record=record, url=url, announced_to=announced)

    async def request_print(  # noqa: PLR0913
        self,
        kiosk_id: str,
        file_id: UUID,
        base_url: str,
        color: ColorMode | None = None,
        copies: int | None = None,
        page_range: str | None = None,
        user_id: UUID | None = None,
    ) -> PrintResult:
        """Send a print job to the kiosk's live channel."""
        if not kiosk_id:
            raise ValidationError("Missing kioskId")
        record = await run_in_threadpool(self.content_service.get, file_id)
        if user_id is not None:
            await run_in_threadpool(self.identity_service.require_user, user_id)
        handle = self.registry.resolve_kiosk(kiosk_id)
        if handle is None:
            raise KioskOfflineError("Kiosk is offline")

        job = await run_in_threadpool(
            self.job_repository.create_job,
            PrintJobRecord(
                id=uuid4(),
                file_id=record.id,
                kiosk_id=kiosk_id,
                user_id=user_id,
                color=color or record.color,
                copies=copies or record.copies,
                page_range=page_range or None,
                status=JobStatus.REQUESTED,
                requested_at=datetime.now(tz=UTC),
            ),
        )
        payload = PrintRequestedPayload(
            job_id=str(job.id),
            file_id=str(record.id),
            filename=record.filename,
            url=self.content_service.download_url(record, base_url),
            content_type=record.content_type,
            size=record.size,
            color=job.color.value,
            copies=job.copies,
            page_range=job.page_range,
            user_id=str(user_id) if user_id else None,
            timestamp=job.requested_at.isoformat(),
        )
        if not await self.hub.deliver(handle, RelayEvent.PRINT_REQUESTED, payload):
            self.registry.unregister_if_owner(kiosk_id, handle)
            await run_in_threadpool(self.job_repository.delete_job, job.id)
            raise KioskOfflineError("Kiosk is offline")
        logger.info(
            "Print job sent",
            extra={"job_id": str(job.id), "kiosk_id": kiosk_id},
        )
        stored = await run_in_threadpool(self.job_repository.get_job, job.id)
        return PrintResult(job=stored or job, payload=payload)

    def get_job(self, job_id: UUID) -> PrintJobRecord:
        """Return a print job or raise ``NotFoundError``."""
        job = self.job_repository.get_job(job_id)
        if job is None:
            raise NotFoundError("Print job not found")
        return job

    async def _mark_dispatched(self, data: object) -> None:
        job_id = data.get("jobId") if isinstance(data, dict) else None
        if not job_id:
            return
        await run_in_threadpool(
            self.job_repository.update_status,
            UUID(str(job_id)),
            JobStatus.DISPATCHED,
        )
