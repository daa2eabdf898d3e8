"""Supabase file transports: inline table rows or Storage objects.

The Supabase client is synchronous, so its calls run in the threadpool to
keep the event loop free for relay traffic.
"""

import base64
from dataclasses import dataclass

import httpx
from fastapi.concurrency import run_in_threadpool
from supabase import Client

from kiosk_print.domain.files import FileTransport
from kiosk_print.services.content import BlobStore


@dataclass
class SupabaseInlineBlobStore(BlobStore):
    """Stores file bytes base64-encoded in the ``file_blobs`` table."""

    client: Client
    transport: FileTransport = FileTransport.INLINE

    async def write(self, key: str, data: bytes, content_type: str) -> str:
        """Insert the bytes and return the key as locator."""
        await run_in_threadpool(self._insert, key, data, content_type)
        return key

    async def read(self, locator: str) -> bytes:
        """Return the bytes stored under the key."""
        encoded = await run_in_threadpool(self._select, locator)
        return base64.b64decode(encoded)

    def _insert(self, key: str, data: bytes, content_type: str) -> None:
        response = (
            self.client.table("file_blobs")
            .insert(
                {
                    "key": key,
                    "content_type": content_type,
                    "data_b64": base64.b64encode(data).decode("ascii"),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store file bytes")

    def _select(self, locator: str) -> str:
        response = (
            self.client.table("file_blobs")
            .select("data_b64")
            .eq("key", locator)
            .limit(1)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Missing blob for {locator}")
        return str(response.data[0]["data_b64"])


@dataclass
class SupabaseStorageBlobStore(BlobStore):
    """Uploads to a Supabase Storage bucket and hands out its public URL."""

    client: Client
    bucket: str
    http_client: httpx.AsyncClient
    transport: FileTransport = FileTransport.EXTERNAL

    @classmethod
    def create(cls, client: Client, bucket: str) -> "SupabaseStorageBlobStore":
        """Create a blob store with a managed httpx session."""
        return cls(client=client, bucket=bucket, http_client=httpx.AsyncClient())

    async def write(self, key: str, data: bytes, content_type: str) -> str:
        """Upload the object and return its public URL."""
        return await run_in_threadpool(self._upload, key, data, content_type)

    async def read(self, locator: str) -> bytes:
        """Download the object from its public URL."""
        response = await self.http_client.get(locator, timeout=20)
        if response.status_code == httpx.codes.NOT_FOUND:
            raise RuntimeError(f"Missing object at {locator}")
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _upload(self, key: str, data: bytes, content_type: str) -> str:
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(key, data, {"content-type": content_type})
        return bucket.get_public_url(key)
