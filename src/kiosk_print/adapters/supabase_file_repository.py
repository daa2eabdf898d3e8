"""Supabase-backed file metadata repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from kiosk_print.domain.files import ColorMode, FileTransport, StoredFileRecord
from kiosk_print.services.content import FileRepository

_COLUMNS = (
    "id, owner_id, kiosk_id, filename, content_type, size, uploaded_at, "
    "transport, locator, color, copies"
)


@dataclass
class SupabaseFileRepository(FileRepository):
    """Supabase implementation for stored file metadata."""

    client: Client

    def create_file(self, record: StoredFileRecord) -> StoredFileRecord:
        """Insert a metadata row and return the stored record."""
        response = (
            self.client.table("stored_files")
            .insert(
                {
                    "id": str(record.id),
                    "owner_id": str(record.owner_id),
                    "kiosk_id": record.kiosk_id,
                    "filename": record.filename,
                    "content_type": record.content_type,
                    "size": record.size,
                    "uploaded_at": record.uploaded_at.isoformat(),
                    "transport": record.transport.value,
                    "locator": record.locator,
                    "color": record.color.value,
                    "copies": record.copies,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create file metadata")
        return _row_to_file(response.data[0])

    def get_file(self, file_id: UUID) -> StoredFileRecord | None:
        """Return file metadata by id, if present."""
        response = (
            self.client.table("stored_files")
            .select(_COLUMNS)
            .eq("id", str(file_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_file(response.data[0])

    def list_files_for_owner(self, owner_id: UUID) -> list[StoredFileRecord]:
        """Return an owner's files, newest first."""
        response = (
            self.client.table("stored_files")
            .select(_COLUMNS)
            .eq("owner_id", str(owner_id))
            .order("uploaded_at", desc=True)
            .execute()
        )
        return [_row_to_file(row) for row in response.data or []]


def _row_to_file(row: dict[str, object]) -> StoredFileRecord:
    return StoredFileRecord(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["owner_id"])),
        kiosk_id=row.get("kiosk_id"),
        filename=str(row["filename"]),
        content_type=str(row["content_type"]),
        size=int(row["size"]),
        uploaded_at=datetime.fromisoformat(str(row["uploaded_at"])),
        transport=FileTransport(row["transport"]),
        locator=str(row["locator"]),
        color=ColorMode(row.get("color") or ColorMode.BLACK_WHITE),
        copies=int(row.get("copies") or 1),
    )
