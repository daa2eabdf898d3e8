"""Account registration and login."""

import hmac
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from werkzeug.security import check_password_hash, generate_password_hash

from kiosk_print.domain.accounts import AccountRecord, AccountRole
from kiosk_print.services.errors import (
    DuplicateAccountError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class AccountRepository(Protocol):
    """Persistence interface for accounts."""

    def get_by_credential_name(
        self, role: AccountRole, credential_name: str
    ) -> AccountRecord | None:
        """Return the account with this name for the role, if present."""

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        """Return an account by id, if present."""

    def create_account(
        self,
        role: AccountRole,
        credential_name: str,
        secret: str,
        location: str | None,
    ) -> AccountRecord:
        """Create and return a new account."""


@dataclass
class IdentityService:
    """Application service for the identity store."""

    repository: AccountRepository
    legacy_plaintext_secrets: bool = False

    def register(
        self,
        role: AccountRole,
        credential_name: str,
        secret: str,
        location: str | None = None,
    ) -> AccountRecord:
        """Create an account, failing when the name is taken for the role."""
        name = credential_name.strip()
        if not name:
            raise ValidationError("Missing credentialName")
        if not secret:
            raise ValidationError("Missing secret")
        if self.repository.get_by_credential_name(role, name):
            raise DuplicateAccountError(f"{role.value.capitalize()} already exists")
        account = self.repository.create_account(
            role=role,
            credential_name=name,
            secret=generate_password_hash(secret),
            location=location if role is AccountRole.KIOSK else None,
        )
        logger.info(
            "Account registered",
            extra={"account_id": str(account.id), "role": role.value},
        )
        return account

    def authenticate(
        self, role: AccountRole, credential_name: str, secret: str
    ) -> AccountRecord:
        """Return the account matching the credentials."""
        account = self.repository.get_by_credential_name(role, credential_name.strip())
        if account is None or not self._secret_matches(account.secret, secret):
            raise InvalidCredentialsError("Invalid credentials")
        return account

    def require_user(self, user_id: UUID) -> AccountRecord:
        """Return the user account for an id or raise ``NotFoundError``."""
        account = self.repository.get_by_id(user_id)
        if account is None or account.role is not AccountRole.USER:
            raise NotFoundError("User not found")
        return account

    def _secret_matches(self, stored: str, secret: str) -> bool:
        try:
            if check_password_hash(stored, secret):
                return True
        except ValueError:
            # Plaintext containing "$" parses as a hash with an unknown method.
            logger.debug("Stored secret is not a password hash")
        # Rows written before hashing hold the secret as-is.
        return self.legacy_plaintext_secrets and hmac.compare_digest(
            stored.encode(), secret.encode()
        )
