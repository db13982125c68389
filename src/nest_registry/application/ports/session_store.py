"""Port describing staged publish session state."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Protocol

from nest_registry.domain.publish import PublishSession


class PublishSessionStorePort(Protocol):
    """Registry of open publish sessions keyed by token."""

    def insert(self, session: PublishSession) -> bool:
        """Store ``session`` unless its token is taken; return whether it was stored."""

    def get(self, token: str) -> PublishSession | None:
        """Return the open session identified by ``token``."""

    def contains(self, token: str) -> bool:
        """Return ``True`` when ``token`` belongs to an open session."""

    def merge_pieces(
        self,
        token: str,
        pieces: Mapping[str, str],
        *,
        at: datetime,
    ) -> PublishSession | None:
        """Atomically merge ``pieces`` into the session; ``None`` if it is gone."""

    def take(self, token: str) -> PublishSession | None:
        """Atomically remove and return the session identified by ``token``."""

    def evict_idle(self, *, now: datetime, ttl: timedelta) -> tuple[PublishSession, ...]:
        """Remove and return sessions with no activity within ``ttl``."""

    def __len__(self) -> int:
        """Return the number of open sessions."""


__all__ = ["PublishSessionStorePort"]
