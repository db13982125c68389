"""Content storage gateway connectivity settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nest_registry.infrastructure.retry import (
    DEFAULT_ATTEMPTS,
    DEFAULT_INITIAL_MS,
    DEFAULT_JITTER,
    DEFAULT_MAX_MS,
    RetryPolicy,
)


class ContentStoreSettings(BaseSettings):
    """Endpoint, timeouts and retry/backoff policy for the gateway."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    base_url: str = Field(default="http://localhost:1984", alias="CONTENT_STORE_URL")
    path: str = Field(default="/", alias="CONTENT_STORE_PATH")
    timeout_seconds: float = Field(default=30.0, alias="CONTENT_STORE_TIMEOUT_SECONDS", gt=0)
    max_concurrency: int | None = Field(default=8, alias="CONTENT_STORE_MAX_CONCURRENCY", ge=1)
    retry_attempts: int = Field(default=DEFAULT_ATTEMPTS, alias="CONTENT_STORE_RETRY_ATTEMPTS", ge=1)
    retry_initial_ms: int = Field(default=DEFAULT_INITIAL_MS, alias="CONTENT_STORE_RETRY_INITIAL_MS", ge=0)
    retry_max_ms: int = Field(default=DEFAULT_MAX_MS, alias="CONTENT_STORE_RETRY_MAX_MS", ge=0)
    retry_jitter: float = Field(default=DEFAULT_JITTER, alias="CONTENT_STORE_RETRY_JITTER", ge=0.0, le=1.0)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            attempts=self.retry_attempts,
            initial_ms=self.retry_initial_ms,
            max_ms=self.retry_max_ms,
            jitter=self.retry_jitter,
        )


__all__ = ["ContentStoreSettings"]
