"""In-memory publish session store."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from threading import Lock

from nest_registry.application.ports.session_store import PublishSessionStorePort
from nest_registry.domain.publish import PublishSession


class InMemoryPublishSessionStore(PublishSessionStorePort):
    """Holds open publish sessions for the lifetime of the process."""

    def __init__(self) -> None:
        self._sessions: dict[str, PublishSession] = {}
        self._lock = Lock()

    def insert(self, session: PublishSession) -> bool:
        with self._lock:
            if session.token in self._sessions:
                return False
            self._sessions[session.token] = session
        return True

    def get(self, token: str) -> PublishSession | None:
        with self._lock:
            return self._sessions.get(token)

    def contains(self, token: str) -> bool:
        with self._lock:
            return token in self._sessions

    def merge_pieces(
        self,
        token: str,
        pieces: Mapping[str, str],
        *,
        at: datetime,
    ) -> PublishSession | None:
        with self._lock:
            current = self._sessions.get(token)
            if current is None:
                return None
            updated = current.with_pieces(pieces, at=at)
            self._sessions[token] = updated
        return updated

    def take(self, token: str) -> PublishSession | None:
        with self._lock:
            return self._sessions.pop(token, None)

    def evict_idle(self, *, now: datetime, ttl: timedelta) -> tuple[PublishSession, ...]:
        with self._lock:
            idle = [token for token, s in self._sessions.items() if s.is_idle(now=now, ttl=ttl)]
            return tuple(self._sessions.pop(token) for token in idle)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["InMemoryPublishSessionStore"]
