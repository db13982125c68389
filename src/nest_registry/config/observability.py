"""Observability configuration."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ObservabilitySettings(BaseSettings):
    """Flags controlling logging/export behavior."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    enable_json_logs: bool = Field(default=False, alias="ENABLE_JSON_LOGS")
    service_name: str = Field(default="nest-registry", alias="OTEL_SERVICE_NAME")


__all__ = ["ObservabilitySettings"]
