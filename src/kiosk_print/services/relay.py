"""Room-based publish/subscribe relay for kiosk and user channels."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from pydantic import BaseModel

from kiosk_print.domain.events import RelayEvent, build_frame, encode_payload
from kiosk_print.services.sessions import ChannelHandle

logger = logging.getLogger(__name__)

EventPayload = BaseModel | dict[str, object] | str | None
EventCallback = Callable[[object], Awaitable[None]]


@dataclass
class RelayHub:
    """Fans events out to every channel joined to a room.

    Delivery is at most once: nothing is queued for channels that join
    later and nobody acknowledges receipt. Handles are tracked by
    identity, so they must hash by identity.
    """

    _rooms: dict[str, dict[ChannelHandle, None]] = field(default_factory=dict)
    _memberships: dict[ChannelHandle, set[str]] = field(default_factory=dict)
    _callbacks: dict[ChannelHandle, dict[str, list[EventCallback]]] = field(
        default_factory=dict
    )

    def join(self, handle: ChannelHandle, room: str) -> None:
        """Add the handle to a room; joining twice has no extra effect."""
        if not room:
            return
        self._rooms.setdefault(room, {})[handle] = None
        self._memberships.setdefault(handle, set()).add(room)

    def leave(self, handle: ChannelHandle, room: str) -> None:
        """Remove the handle from a room, dropping the room once empty."""
        members = self._rooms.get(room)
        if members is not None:
            members.pop(handle, None)
            if not members:
                del self._rooms[room]
        rooms = self._memberships.get(handle)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._memberships[handle]

    def leave_all(self, handle: ChannelHandle) -> None:
        """Remove the handle from every room and drop its subscriptions."""
        for room in list(self._memberships.get(handle, ())):
            self.leave(handle, room)
        self._callbacks.pop(handle, None)

    def rooms_of(self, handle: ChannelHandle) -> set[str]:
        return set(self._memberships.get(handle, ()))

    def members(self, room: str) -> list[ChannelHandle]:
        return list(self._rooms.get(room, {}))

    def on_event(
        self, handle: ChannelHandle, event: RelayEvent | str, callback: EventCallback
    ) -> None:
        """Call ``callback`` whenever ``event`` is delivered to ``handle``."""
        self._callbacks.setdefault(handle, {}).setdefault(str(event), []).append(
            callback
        )

    def is_subscribed(self, handle: ChannelHandle, event: RelayEvent | str) -> bool:
        return bool(self._callbacks.get(handle, {}).get(str(event)))

    async def publish(
        self, room: str, event: RelayEvent | str, payload: EventPayload
    ) -> int:
        """Deliver an event to every handle in the room.

        Returns the number of handles the event was handed to. An empty or
        unknown room drops the event.
        """
        members = self.members(room)
        if not members:
            logger.info(
                "Dropped event for empty room",
                extra={"room": room, "event": str(event)},
            )
            return 0
        delivered = 0
        for handle in members:
            if await self.deliver(handle, event, payload):
                delivered += 1
        return delivered

    async def deliver(
        self, handle: ChannelHandle, event: RelayEvent | str, payload: EventPayload
    ) -> bool:
        """Send an event straight to one handle and run its callbacks.

        A failed send is logged and reported as ``False`` so one broken
        connection cannot stop a fan-out. A failing callback is logged and
        the remaining callbacks still run.
        """
        frame = build_frame(event, payload)
        try:
            await handle.send_json(frame)
        except Exception:
            logger.warning(
                "Failed to deliver event",
                exc_info=True,
                extra={"event": str(event)},
            )
            return False
        data = encode_payload(payload)
        for callback in list(self._callbacks.get(handle, {}).get(str(event), ())):
            try:
                await callback(data)
            except Exception:
                # The frame has already been sent.
                logger.exception("Event callback failed", extra={"event": str(event)})
        return True
