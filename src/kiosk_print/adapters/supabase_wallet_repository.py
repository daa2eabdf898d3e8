"""Supabase-backed wallet repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from kiosk_print.domain.wallet import WalletTransaction
from kiosk_print.services.wallet import WalletRepository


@dataclass
class SupabaseWalletRepository(WalletRepository):
    """Balances live on ``accounts.balance``; history in ``wallet_transactions``."""

    client: Client

    def get_balance(self, user_id: UUID) -> float:
        """Return the stored balance, treating a missing value as zero."""
        response = (
            self.client.table("accounts")
            .select("balance")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return 0.0
        return float(response.data[0].get("balance") or 0)

    def increment_balance(self, user_id: UUID, amount: float) -> float:
        """Add to the balance and return the new value."""
        balance = self.get_balance(user_id) + amount
        self.client.table("accounts").update({"balance": balance}).eq(
            "id", str(user_id)
        ).execute()
        return balance

    def add_transaction(
        self, user_id: UUID, kind: str, amount: float
    ) -> WalletTransaction:
        """Insert a history row."""
        response = (
            self.client.table("wallet_transactions")
            .insert({"user_id": str(user_id), "kind": kind, "amount": amount})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record wallet transaction")
        return _row_to_transaction(response.data[0])

    def list_transactions(self, user_id: UUID, limit: int) -> list[WalletTransaction]:
        """Return the newest history rows for a user."""
        response = (
            self.client.table("wallet_transactions")
            .select("id, user_id, kind, amount, created_at")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_row_to_transaction(row) for row in response.data or []]


def _row_to_transaction(row: dict[str, object]) -> WalletTransaction:
    return WalletTransaction(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        kind=str(row["kind"]),
        amount=float(row["amount"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
