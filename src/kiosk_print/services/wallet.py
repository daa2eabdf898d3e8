"""Wallet balances for user accounts."""

import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from kiosk_print.domain.wallet import WalletTransaction
from kiosk_print.services.errors import ValidationError
from kiosk_print.services.identity import IdentityService

HISTORY_LIMIT = 20


class WalletRepository(Protocol):
    """Persistence interface for balances and their history."""

    def get_balance(self, user_id: UUID) -> float:
        """Return the current balance for a user."""

    def increment_balance(self, user_id: UUID, amount: float) -> float:
        """Add ``amount`` to the balance and return the new balance."""

    def add_transaction(
        self, user_id: UUID, kind: str, amount: float
    ) -> WalletTransaction:
        """Record a balance change."""

    def list_transactions(self, user_id: UUID, limit: int) -> list[WalletTransaction]:
        """Return recent transactions, newest first."""


@dataclass(frozen=True)
class WalletSummary:
    balance: float
    history: list[WalletTransaction]

    def view(self) -> dict[str, object]:
        return {
            "balance": self.balance,
            "history": [
                {
                    "id": str(entry.id),
                    "type": entry.kind,
                    "amount": entry.amount,
                    "date": entry.created_at.isoformat(),
                }
                for entry in self.history
            ],
        }


@dataclass
class WalletService:
    """Application service for wallet reads and recharges."""

    repository: WalletRepository
    identity_service: IdentityService

    def summary(self, user_id: UUID) -> WalletSummary:
        """Return the balance and recent history for a user."""
        self.identity_service.require_user(user_id)
        return WalletSummary(
            balance=self.repository.get_balance(user_id),
            history=self.repository.list_transactions(user_id, HISTORY_LIMIT),
        )

    def recharge(self, user_id: UUID, amount: float) -> WalletSummary:
        """Credit a user's wallet."""
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Invalid amount")
        self.identity_service.require_user(user_id)
        balance = self.repository.increment_balance(user_id, amount)
        self.repository.add_transaction(user_id, "credit", amount)
        return WalletSummary(
            balance=balance,
            history=self.repository.list_transactions(user_id, HISTORY_LIMIT),
        )
