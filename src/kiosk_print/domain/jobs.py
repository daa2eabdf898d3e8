"""Domain models for print jobs."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from kiosk_print.domain.files import ColorMode


class JobStatus(StrEnum):
    """Lifecycle of a print job as seen by the server.

    ``DISPATCHED`` only means the kiosk's channel was handed the event; the
    kiosk never acknowledges the actual print.
    """

    REQUESTED = "requested"
    DISPATCHED = "dispatched"


@dataclass(frozen=True)
class PrintJobRecord:
    """Represents a print request sent to a kiosk."""

    id: UUID
    file_id: UUID
    kiosk_id: str
    user_id: UUID | None
    color: ColorMode
    copies: int
    page_range: str | None
    status: JobStatus
    requested_at: datetime

    def view(self) -> dict[str, object]:
        return {
            "jobId": str(self.id),
            "fileId": str(self.file_id),
            "kioskId": self.kiosk_id,
            "userId": str(self.user_id) if self.user_id else None,
            "color": self.color.value,
            "copies": self.copies,
            "pageRange": self.page_range,
            "status": self.status.value,
            "requestedAt": self.requested_at.isoformat(),
        }
