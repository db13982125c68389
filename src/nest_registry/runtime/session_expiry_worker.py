"""Background worker evicting abandoned publish sessions."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from nest_registry.application.ports.session_store import PublishSessionStorePort
from nest_registry.domain.publish import PublishSession
from nest_registry.runtime.base_worker import PeriodicWorker


class SessionExpiryWorker(PeriodicWorker):
    """Drops sessions that have not received a piece within the TTL."""

    worker_name = "publish-session-expiry"
    logger_name = "nest_registry.session_expiry"
    default_interval = 30.0

    def __init__(
        self,
        *,
        sessions: PublishSessionStorePort,
        ttl: timedelta,
        poll_interval_seconds: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(interval=poll_interval_seconds)
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._sessions = sessions
        self._ttl = ttl
        self._clock = clock or (lambda: datetime.now(UTC))

    def sweep(self) -> tuple[PublishSession, ...]:
        """Evict idle sessions now and return them."""
        evicted = self._sessions.evict_idle(now=self._clock(), ttl=self._ttl)
        for session in evicted:
            self._logger.info(
                "publish session expired",
                extra={
                    "data": {
                        "token": session.token,
                        "package": session.package_name,
                        "version": session.target_version,
                        "piece_count": len(session.pieces),
                        "last_activity_at": session.last_activity_at.isoformat(),
                    }
                },
            )
        return evicted

    def _tick(self) -> None:
        self.sweep()


def create_session_expiry_worker(
    *,
    sessions: PublishSessionStorePort,
    ttl: timedelta,
    poll_interval_seconds: float | None = None,
) -> SessionExpiryWorker:
    """Factory function to create a SessionExpiryWorker with injected dependencies."""
    return SessionExpiryWorker(
        sessions=sessions,
        ttl=ttl,
        poll_interval_seconds=poll_interval_seconds,
    )


__all__ = ["SessionExpiryWorker", "create_session_expiry_worker"]
