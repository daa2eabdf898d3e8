"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import Client, create_client

from kiosk_print.adapters.memory_repositories import (
    InMemoryAccountRepository,
    InMemoryBlobStore,
    InMemoryFileRepository,
    InMemoryPrintJobRepository,
    InMemoryWalletRepository,
)
from kiosk_print.adapters.supabase_account_repository import SupabaseAccountRepository
from kiosk_print.adapters.supabase_blob_stores import (
    SupabaseInlineBlobStore,
    SupabaseStorageBlobStore,
)
from kiosk_print.adapters.supabase_file_repository import SupabaseFileRepository
from kiosk_print.adapters.supabase_print_job_repository import (
    SupabasePrintJobRepository,
)
from kiosk_print.adapters.supabase_wallet_repository import SupabaseWalletRepository
from kiosk_print.config import Settings
from kiosk_print.services.content import BlobStore, ContentService
from kiosk_print.services.identity import IdentityService
from kiosk_print.services.printing import PrintFlowService
from kiosk_print.services.relay import RelayHub
from kiosk_print.services.sessions import SessionRegistry
from kiosk_print.services.wallet import WalletService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    registry: SessionRegistry
    hub: RelayHub
    identity_service: IdentityService
    content_service: ContentService
    print_flow_service: PrintFlowService
    wallet_service: WalletService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = _supabase_client(resolved_settings)

    if resolved_settings.storage_backend == "supabase":
        account_repository = SupabaseAccountRepository(supabase_client)
        file_repository = SupabaseFileRepository(supabase_client)
        job_repository = SupabasePrintJobRepository(supabase_client)
        wallet_repository = SupabaseWalletRepository(supabase_client)
    else:
        account_repository = InMemoryAccountRepository()
        file_repository = InMemoryFileRepository()
        job_repository = InMemoryPrintJobRepository()
        wallet_repository = InMemoryWalletRepository()

    storage_blob_store: SupabaseStorageBlobStore | None = None
    blob_store: BlobStore
    if resolved_settings.file_transport == "external":
        storage_blob_store = SupabaseStorageBlobStore.create(
            supabase_client, resolved_settings.storage_bucket
        )
        blob_store = storage_blob_store
    elif resolved_settings.storage_backend == "supabase":
        blob_store = SupabaseInlineBlobStore(supabase_client)
    else:
        blob_store = InMemoryBlobStore()

    registry = SessionRegistry()
    hub = RelayHub()
    identity_service = IdentityService(
        account_repository,
        legacy_plaintext_secrets=resolved_settings.legacy_plaintext_secrets,
    )
    content_service = ContentService(
        repository=file_repository,
        blob_store=blob_store,
        identity_service=identity_service,
        max_upload_bytes=resolved_settings.max_upload_bytes,
    )
    print_flow_service = PrintFlowService(
        content_service=content_service,
        identity_service=identity_service,
        registry=registry,
        hub=hub,
        job_repository=job_repository,
    )
    wallet_service = WalletService(wallet_repository, identity_service)

    async def close_resources() -> None:
        if storage_blob_store is not None:
            await storage_blob_store.close()

    return AppContainer(
        settings=resolved_settings,
        registry=registry,
        hub=hub,
        identity_service=identity_service,
        content_service=content_service,
        print_flow_service=print_flow_service,
        wallet_service=wallet_service,
        close_resources=close_resources,
    )


def _supabase_client(settings: Settings) -> Client | None:
    if not settings.needs_supabase:
        return None
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the "
            "supabase storage backend or the external file transport"
        )
    return create_client(settings.supabase_url, settings.supabase_service_key)
