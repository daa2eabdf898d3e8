"""Wallet domain models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class WalletTransaction:
    """A single balance change for a user."""

    id: UUID
    user_id: UUID
    kind: str
    amount: float
    created_at: datetime
