"""Domain models for uploaded files."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

DEFAULT_CONTENT_TYPE = "application/octet-stream"
MIN_COPIES = 1
MAX_COPIES = 10


class ColorMode(StrEnum):
    """Print color preference."""

    BLACK_WHITE = "black_white"
    COLOR = "color"


class FileTransport(StrEnum):
    """Where the bytes of a stored file live."""

    INLINE = "inline"
    EXTERNAL = "external"


@dataclass(frozen=True)
class StoredFileRecord:
    """Metadata for an uploaded file."""

    id: UUID
    owner_id: UUID
    kiosk_id: str | None
    filename: str
    content_type: str
    size: int
    uploaded_at: datetime
    transport: FileTransport
    locator: str
    color: ColorMode = ColorMode.BLACK_WHITE
    copies: int = MIN_COPIES

    def listing_view(self) -> dict[str, object]:
        """Return the listing shape used by the files endpoint."""
        return {
            "fileId": str(self.id),
            "filename": self.filename,
            "uploadDate": self.uploaded_at.isoformat(),
            "length": self.size,
            "contentType": self.content_type,
            "metadata": {
                "userId": str(self.owner_id),
                "kioskId": self.kiosk_id,
                "color": self.color.value,
                "copies": self.copies,
            },
        }
