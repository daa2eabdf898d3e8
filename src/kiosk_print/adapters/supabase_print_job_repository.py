"""Supabase-backed print job repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from kiosk_print.domain.files import ColorMode
from kiosk_print.domain.jobs import JobStatus, PrintJobRecord
from kiosk_print.services.printing import PrintJobRepository

_COLUMNS = (
    "id, file_id, kiosk_id, user_id, color, copies, page_range, status, requested_at"
)


@dataclass
class SupabasePrintJobRepository(PrintJobRepository):
    """Supabase implementation for print jobs."""

    client: Client

    def create_job(self, record: PrintJobRecord) -> PrintJobRecord:
        """Create a print job row and return it."""
        response = (
            self.client.table("print_jobs")
            .insert(
                {
                    "id": str(record.id),
                    "file_id": str(record.file_id),
                    "kiosk_id": record.kiosk_id,
                    "user_id": str(record.user_id) if record.user_id else None,
                    "color": record.color.value,
                    "copies": record.copies,
                    "page_range": record.page_range,
                    "status": record.status.value,
                    "requested_at": record.requested_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create print job")
        return _row_to_job(response.data[0])

    def get_job(self, job_id: UUID) -> PrintJobRecord | None:
        """Return a print job by id, if present."""
        response = (
            self.client.table("print_jobs")
            .select(_COLUMNS)
            .eq("id", str(job_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_job(response.data[0])

    def update_status(self, job_id: UUID, status: JobStatus) -> None:
        """Update the job status."""
        self.client.table("print_jobs").update({"status": status.value}).eq(
            "id", str(job_id)
        ).execute()

    def delete_job(self, job_id: UUID) -> None:
        """Delete the job row."""
        self.client.table("print_jobs").delete().eq("id", str(job_id)).execute()


def _row_to_job(row: dict[str, object]) -> PrintJobRecord:
    return PrintJobRecord(
        id=UUID(str(row["id"])),
        file_id=UUID(str(row["file_id"])),
        kiosk_id=str(row["kiosk_id"]),
        user_id=UUID(str(row["user_id"])) if row.get("user_id") else None,
        color=ColorMode(row["color"]),
        copies=int(row["copies"]),
        page_range=row.get("page_range"),
        status=JobStatus(row["status"]),
        requested_at=datetime.fromisoformat(str(row["requested_at"])),
    )
