"""WebSocket endpoint for kiosks and user devices.

Frames in both directions are JSON objects ``{"event": name, "data": ...}``.
Clients have historically sent ``data`` either as a bare kiosk id string or
as an object, so both are accepted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from kiosk_print.domain.accounts import AccountRole
from kiosk_print.domain.events import KioskJoinedPayload, RelayEvent, UserJoinedPayload

if TYPE_CHECKING:
    from kiosk_print.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

JOIN_KIOSK = "joinKiosk"
USER_CONNECTED = "userConnected"


@dataclass(eq=False)
class WebSocketChannel:
    """Channel handle wrapping one accepted WebSocket."""

    websocket: WebSocket
    role: AccountRole
    kiosk_ids: set[str] = field(default_factory=set)

    async def send_json(self, data: object) -> None:
        await self.websocket.send_json(data)


@router.websocket("/ws")
async def relay_socket(
    websocket: WebSocket, role: AccountRole = Query(default=AccountRole.USER)
) -> None:
    """Relay events between a connected client and its kiosk rooms."""
    container: AppContainer = websocket.app.state.container
    await websocket.accept()
    channel = WebSocketChannel(websocket=websocket, role=role)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                logger.warning("Ignored binary frame", extra={"role": role.value})
                continue
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Ignored malformed frame", extra={"role": role.value})
                continue
            if not isinstance(frame, dict):
                logger.warning("Ignored malformed frame", extra={"role": role.value})
                continue
            await _handle_frame(container, channel, frame)
    except WebSocketDisconnect:
        logger.info(
            "Channel disconnected",
            extra={"role": role.value, "kiosk_ids": sorted(channel.kiosk_ids)},
        )
    finally:
        container.print_flow_service.detach_channel(channel.kiosk_ids, channel)


async def _handle_frame(
    container: AppContainer, channel: WebSocketChannel, frame: dict[str, object]
) -> None:
    event = frame.get("event")
    data = frame.get("data")
    kiosk_id = _kiosk_id_from(data)
    if event == JOIN_KIOSK:
        if not kiosk_id:
            return
        if channel.role is AccountRole.KIOSK:
            container.print_flow_service.attach_kiosk(kiosk_id, channel)
            channel.kiosk_ids.add(kiosk_id)
        else:
            container.hub.join(channel, kiosk_id)
        await container.hub.deliver(
            channel, RelayEvent.KIOSK_JOINED, KioskJoinedPayload(kiosk_id=kiosk_id)
        )
    elif event == USER_CONNECTED:
        if not kiosk_id:
            return
        user_id = data.get("userId") if isinstance(data, dict) else None
        await container.hub.publish(
            kiosk_id,
            RelayEvent.USER_JOINED,
            UserJoinedPayload(
                kiosk_id=kiosk_id, user_id=str(user_id) if user_id else None
            ),
        )
        container.hub.join(channel, kiosk_id)
    elif event == RelayEvent.DOWNLOAD_STARTED:
        if not kiosk_id:
            return
        await container.hub.publish(kiosk_id, RelayEvent.DOWNLOAD_STARTED, data)
    else:
        logger.info("Ignored unknown event", extra={"event": str(event)})


def _kiosk_id_from(data: object) -> str | None:
    if isinstance(data, str):
        return data.strip() or None
    if isinstance(data, dict):
        value = data.get("kioskId")
        if value is not None:
            return str(value).strip() or None
    return None
