from __future__ import annotations

from functools import lru_cache

from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized config.

    Read from env (HISTORY_EXCERPTOR_*) or a local .env file.
    The signature bucket and the status-check budget have no defaults:
    a deployment must set them explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="HISTORY_EXCERPTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Registry database holding the *_hst tables
    db_url: str = "duckdb:///data/registry.duckdb"
    history_table_suffix: str = "_hst"

    # Required
    request_signature_bucket: str
    excerpt_status_check_max_attempts: PositiveInt

    # Remote services
    digital_seal_base_url: str = "http://digital-signature-ops:8080"
    excerpt_base_url: str = "http://excerpt-service-api:8080"
    http_timeout_s: float = 20.0

    # S3-compatible (Ceph) object storage
    storage_endpoint_url: str | None = None
    storage_region: str = "us-east-1"
    storage_access_key: str | None = None
    storage_secret_key: str | None = None

    # Excerpt request
    excerpt_type: str = "history-excerpt"
    excerpt_requires_system_signature: bool = True

    # Observability
    log_level: str = "INFO"
    log_format: str = "console"  # json or console


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
