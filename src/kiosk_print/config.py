"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["memory", "supabase"] = "memory"
    file_transport: Literal["inline", "external"] = "inline"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    storage_bucket: str = "uploads"
    public_base_url: str | None = None
    frontend_origins: str = "*"
    wallet_enabled: bool = False
    legacy_plaintext_secrets: bool = False
    max_upload_bytes: int = 50 * 1024 * 1024
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def needs_supabase(self) -> bool:
        """Return true when any configured strategy talks to Supabase."""
        return self.storage_backend == "supabase" or self.file_transport == "external"


def parse_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = [chunk.strip().rstrip("/") for chunk in cleaned.split(",")]
    return [origin for origin in origins if origin] or ["*"]
