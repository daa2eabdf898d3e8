"""Relay events exchanged with kiosks and user devices."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RelayEvent(StrEnum):
    """Outbound event types; values are the names used on the wire."""

    USER_JOINED = "userConnectedMessage"
    FILE_READY = "fileReceived"
    PRINT_REQUESTED = "printFile"
    DOWNLOAD_STARTED = "startDownload"
    KIOSK_JOINED = "kioskJoined"


class _EventPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserJoinedPayload(_EventPayload):
    """Sent to a kiosk room when a user device connects."""

    message: str = "A user has connected to this kiosk"
    kiosk_id: str
    user_id: str | None = None


class FileReadyPayload(_EventPayload):
    """Sent to a kiosk room after an upload is stored."""

    file_id: str
    filename: str
    url: str
    size: int
    content_type: str
    user_id: str


class PrintRequestedPayload(_EventPayload):
    """Sent to the kiosk's channel to start a print."""

    job_id: str
    file_id: str
    filename: str
    url: str
    content_type: str
    size: int
    color: str
    copies: int
    page_range: str | None = None
    user_id: str | None = None
    timestamp: str


class KioskJoinedPayload(_EventPayload):
    """Acknowledges a room join to the joining channel."""

    kiosk_id: str


def encode_payload(payload: BaseModel | dict[str, object] | str | None) -> object:
    """Return a JSON-ready representation of an event payload."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, mode="json")
    return payload


def build_frame(
    event: RelayEvent | str, payload: BaseModel | dict[str, object] | str | None
) -> dict[str, object]:
    """Build the JSON frame pushed down a channel."""
    return {"event": str(event), "data": encode_payload(payload)}
