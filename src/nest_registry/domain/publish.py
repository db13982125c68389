"""Publish session lifecycle record."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True)
class PublishSession:
    """Staging record for one in-progress package version upload."""

    token: str
    package_name: str
    target_version: str
    is_update: bool
    description: str
    owner_id: str
    credential: str
    created_at: datetime
    last_activity_at: datetime
    pieces: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("token must not be empty")
        if not self.package_name:
            raise ValueError("package_name must not be empty")
        if self.last_activity_at < self.created_at:
            raise ValueError("last_activity_at must not precede created_at")

    def with_pieces(self, pieces: Mapping[str, str], *, at: datetime) -> PublishSession:
        """Return a session with ``pieces`` merged in, later names overwriting earlier ones."""
        merged = {**self.pieces, **pieces}
        return replace(self, pieces=merged, last_activity_at=max(at, self.last_activity_at))

    def is_idle(self, *, now: datetime, ttl: timedelta) -> bool:
        """Return ``True`` when no piece has arrived within ``ttl``."""
        return now - self.last_activity_at >= ttl

    def accepts(self, credential: str) -> bool:
        """Return ``True`` when ``credential`` is the one that opened the session."""
        return credential == self.credential


__all__ = ["PublishSession"]
