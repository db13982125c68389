"""Package name blocklist settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NamePolicySettings(BaseSettings):
    """Comma-separated blocked names and name fragments."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    blocked_names_raw: str = Field(default="", alias="BLOCKED_PACKAGE_NAMES")
    blocked_fragments_raw: str = Field(default="", alias="BLOCKED_NAME_FRAGMENTS")

    @property
    def blocked_names(self) -> tuple[str, ...]:
        return _split(self.blocked_names_raw)

    @property
    def blocked_fragments(self) -> tuple[str, ...]:
        return _split(self.blocked_fragments_raw)


def _split(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


__all__ = ["NamePolicySettings"]
