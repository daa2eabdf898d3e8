"""In-process storage strategies for local runs and single-node setups."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

from kiosk_print.domain.accounts import AccountRecord, AccountRole
from kiosk_print.domain.files import FileTransport, StoredFileRecord
from kiosk_print.domain.jobs import JobStatus, PrintJobRecord
from kiosk_print.domain.wallet import WalletTransaction
from kiosk_print.services.content import BlobStore, FileRepository
from kiosk_print.services.identity import AccountRepository
from kiosk_print.services.printing import PrintJobRepository
from kiosk_print.services.wallet import WalletRepository


@dataclass
class InMemoryAccountRepository(AccountRepository):
    """Accounts kept in a dict keyed by id."""

    accounts: dict[UUID, AccountRecord] = field(default_factory=dict)

    def get_by_credential_name(
        self, role: AccountRole, credential_name: str
    ) -> AccountRecord | None:
        for account in self.accounts.values():
            if account.role is role and account.credential_name == credential_name:
                return account
        return None

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        return self.accounts.get(account_id)

    def create_account(
        self,
        role: AccountRole,
        credential_name: str,
        secret: str,
        location: str | None,
    ) -> AccountRecord:
        account = AccountRecord(
            id=uuid4(),
            role=role,
            credential_name=credential_name,
            secret=secret,
            location=location,
            balance=0.0 if role is AccountRole.USER else None,
        )
        self.accounts[account.id] = account
        return account


@dataclass
class InMemoryFileRepository(FileRepository):
    files: dict[UUID, StoredFileRecord] = field(default_factory=dict)

    def create_file(self, record: StoredFileRecord) -> StoredFileRecord:
        self.files[record.id] = record
        return record

    def get_file(self, file_id: UUID) -> StoredFileRecord | None:
        return self.files.get(file_id)

    def list_files_for_owner(self, owner_id: UUID) -> list[StoredFileRecord]:
        owned = [
            record for record in self.files.values() if record.owner_id == owner_id
        ]
        return sorted(owned, key=lambda record: record.uploaded_at, reverse=True)


@dataclass
class InMemoryBlobStore(BlobStore):
    """Keeps file bytes inline, keyed by the storage key."""

    blobs: dict[str, bytes] = field(default_factory=dict)
    transport: FileTransport = FileTransport.INLINE

    async def write(self, key: str, data: bytes, content_type: str) -> str:
        self.blobs[key] = data
        return key

    async def read(self, locator: str) -> bytes:
        try:
            return self.blobs[locator]
        except KeyError:
            raise RuntimeError(f"Missing blob for {locator}") from None


@dataclass
class InMemoryPrintJobRepository(PrintJobRepository):
    jobs: dict[UUID, PrintJobRecord] = field(default_factory=dict)

    def create_job(self, record: PrintJobRecord) -> PrintJobRecord:
        self.jobs[record.id] = record
        return record

    def get_job(self, job_id: UUID) -> PrintJobRecord | None:
        return self.jobs.get(job_id)

    def update_status(self, job_id: UUID, status: JobStatus) -> None:
        job = self.jobs.get(job_id)
        if job is not None:
            self.jobs[job_id] = replace(job, status=status)

    def delete_job(self, job_id: UUID) -> None:
        self.jobs.pop(job_id, None)


@dataclass
class InMemoryWalletRepository(WalletRepository):
    balances: dict[UUID, float] = field(default_factory=dict)
    transactions: list[WalletTransaction] = field(default_factory=list)

    def get_balance(self, user_id: UUID) -> float:
        return self.balances.get(user_id, 0.0)

    def increment_balance(self, user_id: UUID, amount: float) -> float:
        self.balances[user_id] = self.get_balance(user_id) + amount
        return self.balances[user_id]

    def add_transaction(
        self, user_id: UUID, kind: str, amount: float
    ) -> WalletTransaction:
        entry = WalletTransaction(
            id=uuid4(),
            user_id=user_id,
            kind=kind,
            amount=amount,
            created_at=datetime.now(tz=UTC),
        )
        self.transactions.append(entry)
        return entry

    def list_transactions(self, user_id: UUID, limit: int) -> list[WalletTransaction]:
        owned = [entry for entry in self.transactions if entry.user_id == user_id]
        return list(reversed(owned))[:limit]
