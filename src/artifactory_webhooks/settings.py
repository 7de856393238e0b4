"""Provider settings."""
from __future__ import annotations

from functools import lru_cache
from typing import cast

from pydantic import AnyHttpUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connection and retry configuration, read from ``ARTIFACTORY_*`` variables."""

    model_config = SettingsConfigDict(env_prefix="ARTIFACTORY_", env_file=".env", extra="ignore")

    app_name: str = "artifactory-webhooks"

    url: AnyHttpUrl = Field(default=cast(AnyHttpUrl, "http://localhost:8082"))
    access_token: SecretStr | None = None
    request_timeout_seconds: float = 30.0

    # Retries while a referenced proxy is not yet visible to the event service
    proxy_retry_max_attempts: int = 5
    proxy_retry_wait_min_seconds: float = 1.0
    proxy_retry_wait_max_seconds: float = 20.0

    log_level: str = "INFO"
    otel_exporter_endpoint: AnyHttpUrl | None = None


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
