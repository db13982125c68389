"""Publish session tuning."""

from __future__ import annotations

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nest_registry.application.initiate_publish import ExistingPackagePolicy
from nest_registry.application.tokens import DEFAULT_MAX_ATTEMPTS, DEFAULT_TOKEN_LENGTH
from nest_registry.domain.versioning import DEFAULT_VERSION

DEFAULT_SESSION_TTL_SECONDS = 15 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 30.0
DEFAULT_MAX_PIECE_PAYLOAD_BYTES = 10 * 1024 * 1024


class PublishSettings(BaseSettings):
    """Session lifetime, token shape and publish policy."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    session_ttl_seconds: int = Field(
        default=DEFAULT_SESSION_TTL_SECONDS,
        alias="PUBLISH_SESSION_TTL_SECONDS",
        gt=0,
    )
    sweep_interval_seconds: float = Field(
        default=DEFAULT_SWEEP_INTERVAL_SECONDS,
        alias="PUBLISH_SESSION_SWEEP_INTERVAL_SECONDS",
        gt=0,
    )
    token_length: int = Field(default=DEFAULT_TOKEN_LENGTH, alias="PUBLISH_TOKEN_LENGTH", ge=4, le=64)
    token_max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        alias="PUBLISH_TOKEN_MAX_ATTEMPTS",
        ge=1,
    )
    max_piece_payload_bytes: int = Field(
        default=DEFAULT_MAX_PIECE_PAYLOAD_BYTES,
        alias="MAX_PIECE_PAYLOAD_BYTES",
        gt=0,
    )
    existing_package_policy: ExistingPackagePolicy = Field(
        default=ExistingPackagePolicy.ALLOW,
        alias="EXISTING_PACKAGE_POLICY",
    )
    default_version: str = Field(default=DEFAULT_VERSION, alias="DEFAULT_PACKAGE_VERSION")

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(seconds=self.session_ttl_seconds)


__all__ = ["PublishSettings"]
