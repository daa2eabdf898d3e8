"""Domain models for user and kiosk accounts."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class AccountRole(StrEnum):
    """Kind of account an identity belongs to."""

    USER = "user"
    KIOSK = "kiosk"


@dataclass(frozen=True)
class AccountRecord:
    """Represents an account stored in the identity store."""

    id: UUID
    role: AccountRole
    credential_name: str
    secret: str
    location: str | None = None
    balance: float | None = None

    def public_view(self) -> dict[str, object]:
        """Return the account fields that are safe to send to clients."""
        view: dict[str, object] = {
            "id": str(self.id),
            "type": self.role.value,
            "credentialName": self.credential_name,
        }
        if self.location is not None:
            view["location"] = self.location
        if self.balance is not None:
            view["balance"] = self.balance
        return view
