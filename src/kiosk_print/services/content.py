"""Content store: uploaded file metadata and bytes."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import PurePosixPath, PureWindowsPath
from typing import Protocol
from uuid import UUID, uuid4

from fastapi.concurrency import run_in_threadpool

from kiosk_print.domain.files import (
    DEFAULT_CONTENT_TYPE,
    ColorMode,
    FileTransport,
    StoredFileRecord,
)
from kiosk_print.services.errors import NotFoundError, ValidationError
from kiosk_print.services.identity import IdentityService

logger = logging.getLogger(__name__)


class FileRepository(Protocol):
    """Persistence interface for file metadata."""

    def create_file(self, record: StoredFileRecord) -> StoredFileRecord:
        """Persist file metadata and return it."""

    def get_file(self, file_id: UUID) -> StoredFileRecord | None:
        """Return file metadata by id, if present."""

    def list_files_for_owner(self, owner_id: UUID) -> list[StoredFileRecord]:
        """Return the owner's files, newest first."""


class BlobStore(Protocol):
    """Storage strategy for file bytes."""

    transport: FileTransport

    async def write(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under ``key`` and return the locator to read them back."""

    async def read(self, locator: str) -> bytes:
        """Return the bytes stored at ``locator``."""


@dataclass
class ContentService:
    """Application service for uploaded files."""

    repository: FileRepository
    blob_store: BlobStore
    identity_service: IdentityService
    max_upload_bytes: int

    async def store(  # noqa: PLR0913
        self,
        owner_id: UUID,
        filename: str | None,
        content_type: str | None,
        data: bytes,
        kiosk_id: str | None = None,
        color: ColorMode = ColorMode.BLACK_WHITE,
        copies: int = 1,
    ) -> StoredFileRecord:
        """Persist the bytes and metadata of an upload."""
        await run_in_threadpool(self.identity_service.require_user, owner_id)
        name = _safe_filename(filename)
        if not name:
            raise ValidationError("No file uploaded")
        if len(data) > self.max_upload_bytes:
            raise ValidationError("File too large")
        file_id = uuid4()
        resolved_type = content_type or DEFAULT_CONTENT_TYPE
        locator = await self.blob_store.write(
            f"{owner_id}/{file_id}/{name}", data, resolved_type
        )
        record = await run_in_threadpool(
            self.repository.create_file,
            StoredFileRecord(
                id=file_id,
                owner_id=owner_id,
                kiosk_id=kiosk_id or None,
                filename=name,
                content_type=resolved_type,
                size=len(data),
                uploaded_at=datetime.now(tz=UTC),
                transport=self.blob_store.transport,
                locator=locator,
                color=color,
                copies=copies,
            ),
        )
        logger.info(
            "File stored",
            extra={"file_id": str(record.id), "file_size": record.size},
        )
        return record

    def get(self, file_id: UUID) -> StoredFileRecord:
        """Return file metadata or raise ``NotFoundError``."""
        record = self.repository.get_file(file_id)
        if record is None:
            raise NotFoundError("File not found")
        return record

    def list_for_owner(self, owner_id: UUID) -> list[StoredFileRecord]:
        """Return a user's files, newest first."""
        self.identity_service.require_user(owner_id)
        return sorted(
            self.repository.list_files_for_owner(owner_id),
            key=lambda record: record.uploaded_at,
            reverse=True,
        )

    async def read(self, record: StoredFileRecord) -> bytes:
        """Return the stored bytes for a file."""
        try:
            return await self.blob_store.read(record.locator)
        except RuntimeError as exc:
            logger.exception("Stored bytes missing", extra={"file_id": str(record.id)})
            raise NotFoundError("File missing in storage") from exc

    @staticmethod
    def download_url(record: StoredFileRecord, base_url: str) -> str:
        """Return the URL a kiosk should fetch the file from."""
        if record.transport is FileTransport.EXTERNAL:
            return record.locator
        return f"{base_url.rstrip('/')}/api/file/{record.id}"


def _safe_filename(filename: str | None) -> str:
    """Strip client-side directories and quotes from an uploaded filename."""
    if not filename:
        return ""
    name = PurePosixPath(PureWindowsPath(filename).name).name
    return name.replace('"', "").strip()
