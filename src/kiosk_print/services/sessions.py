"""Registry of live kiosk channels."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


class ChannelHandle(Protocol):
    """A live connection events can be pushed to."""

    async def send_json(self, data: object) -> None:
        """Push a JSON-serializable frame to the connected client."""


@dataclass
class SessionRegistry:
    """Maps kiosk identifiers to their current channel handle.

    Entries live only in this process and only until the owning handle
    disconnects. There is no heartbeat: a connection that dies without a
    disconnect notification leaves its entry in place.
    """

    _sessions: dict[str, ChannelHandle] = field(default_factory=dict)

    def register_kiosk(self, kiosk_id: str, handle: ChannelHandle) -> None:
        """Record the handle for a kiosk, replacing any previous one."""
        if not kiosk_id:
            return
        previous = self._sessions.get(kiosk_id)
        self._sessions[kiosk_id] = handle
        if previous is not None and previous is not handle:
            logger.info("Kiosk session replaced", extra={"kiosk_id": kiosk_id})
        else:
            logger.info("Kiosk session registered", extra={"kiosk_id": kiosk_id})

    def resolve_kiosk(self, kiosk_id: str) -> ChannelHandle | None:
        """Return the live handle for a kiosk, if any."""
        return self._sessions.get(kiosk_id)

    def unregister_if_owner(self, kiosk_id: str, handle: ChannelHandle) -> bool:
        """Remove the kiosk entry only if it still points at ``handle``.

        A late disconnect from an older connection must not evict the
        session that replaced it.
        """
        if self._sessions.get(kiosk_id) is not handle:
            return False
        del self._sessions[kiosk_id]
        logger.info("Kiosk session removed", extra={"kiosk_id": kiosk_id})
        return True

    def online_kiosks(self) -> list[str]:
        """Return kiosk ids that currently have a registered handle."""
        return sorted(self._sessions)
