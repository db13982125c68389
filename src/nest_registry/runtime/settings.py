"""Configuration helpers for registry runtime wiring."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nest_registry.config.content_store import ContentStoreSettings
from nest_registry.config.name_policy import NamePolicySettings
from nest_registry.config.observability import ObservabilitySettings
from nest_registry.config.publish import PublishSettings


class Settings(BaseSettings):
    """Registry runtime configuration resolved from the environment.

    Only includes genuinely configurable settings; protocol constants live
    with the code that uses them.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    # --- Server ---
    listen_host: str = Field(default="0.0.0.0", alias="NEST_REGISTRY_HOST")  # noqa: S104
    port: int = Field(default=8080, alias="NEST_REGISTRY_PORT")

    # Static API keys for the in-memory directory, "key:user_id[,key:user_id]".
    api_keys_raw: str = Field(default="", alias="NEST_REGISTRY_API_KEYS", repr=False)

    # --- Component settings ---
    publish: PublishSettings = Field(default_factory=PublishSettings)
    content_store: ContentStoreSettings = Field(default_factory=ContentStoreSettings)
    name_policy: NamePolicySettings = Field(default_factory=NamePolicySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @property
    def api_keys(self) -> dict[str, str]:
        keys: dict[str, str] = {}
        for entry in self.api_keys_raw.split(","):
            if not entry.strip():
                continue
            key, sep, user_id = entry.strip().partition(":")
            if not sep or not key or not user_id:
                raise ValueError("NEST_REGISTRY_API_KEYS entries must look like key:user_id")
            keys[key] = user_id
        return keys

    # --- Loader ---
    @classmethod
    def load(cls) -> Settings:
        instance = cls()
        logger = logging.getLogger("nest_registry.settings")
        logger.info("registry settings loaded: %r", instance)
        return instance


__all__ = ["Settings"]
