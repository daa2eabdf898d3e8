"""Supabase-backed account repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from kiosk_print.domain.accounts import AccountRecord, AccountRole
from kiosk_print.services.identity import AccountRepository

_COLUMNS = "id, role, credential_name, secret, location, balance"


@dataclass
class SupabaseAccountRepository(AccountRepository):
    """Supabase implementation for account persistence."""

    client: Client

    def get_by_credential_name(
        self, role: AccountRole, credential_name: str
    ) -> AccountRecord | None:
        """Return the account with this name for the role, if present."""
        response = (
            self.client.table("accounts")
            .select(_COLUMNS)
            .eq("role", role.value)
            .eq("credential_name", credential_name)
            .limit(1)
            .execute()
        )
        if response.data:
            return _row_to_account(response.data[0])
        return None

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        """Return an account by id, if present."""
        response = (
            self.client.table("accounts")
            .select(_COLUMNS)
            .eq("id", str(account_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _row_to_account(response.data[0])
        return None

    def create_account(
        self,
        role: AccountRole,
        credential_name: str,
        secret: str,
        location: str | None,
    ) -> AccountRecord:
        """Create an account row and return it."""
        response = (
            self.client.table("accounts")
            .insert(
                {
                    "role": role.value,
                    "credential_name": credential_name,
                    "secret": secret,
                    "location": location,
                    "balance": 0 if role is AccountRole.USER else None,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create account in Supabase")
        return _row_to_account(response.data[0])


def _row_to_account(row: dict[str, object]) -> AccountRecord:
    balance = row.get("balance")
    return AccountRecord(
        id=UUID(str(row["id"])),
        role=AccountRole(row["role"]),
        credential_name=str(row["credential_name"]),
        secret=str(row["secret"]),
        location=row.get("location"),
        balance=float(balance) if balance is not None else None,
    )
