"""Session token allocation."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from typing import NoReturn

from nest_registry.application.ports.session_store import PublishSessionStorePort
from nest_registry.domain.publish import PublishSession
from nest_registry.errors import TokenSpaceExhaustedError

logger = logging.getLogger("nest_registry.tokens")

DEFAULT_TOKEN_LENGTH = 8
DEFAULT_MAX_ATTEMPTS = 16


def _urlsafe_token(length: int) -> str:
    # token_urlsafe yields ~1.3 chars per byte; trim to the requested length.
    return secrets.token_urlsafe(length)[:length]


class TokenGenerator:
    """Produces short URL-safe tokens that no open session currently holds.

    Candidates are regenerated on collision up to ``max_attempts`` times. A
    realistic session count never gets close; exhausting the budget means
    the store is corrupt or the source of randomness is broken.
    """

    def __init__(
        self,
        sessions: PublishSessionStorePort,
        *,
        length: int = DEFAULT_TOKEN_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        source: Callable[[int], str] | None = None,
    ) -> None:
        if length <= 0:
            raise ValueError("length must be positive")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self._sessions = sessions
        self._length = length
        self._max_attempts = max_attempts
        self._source = source or _urlsafe_token

    def generate(self) -> str:
        """Return a token not held by any open session."""
        for attempt in range(self._max_attempts):
            candidate = self._source(self._length)
            if not self._sessions.contains(candidate):
                return candidate
            self._log_collision(attempt)
        self._exhausted()

    def issue(self, build: Callable[[str], PublishSession]) -> PublishSession:
        """Build a session around a fresh token and insert it in one step.

        The store's insert is the arbiter: a token claimed by a concurrent
        caller between generation and insertion counts as a collision.
        """
        for attempt in range(self._max_attempts):
            candidate = self._source(self._length)
            if self._sessions.contains(candidate):
                self._log_collision(attempt)
                continue
            session = build(candidate)
            if self._sessions.insert(session):
                return session
            self._log_collision(attempt)
        self._exhausted()

    def _log_collision(self, attempt: int) -> None:
        logger.debug(
            "publish token collision",
            extra={"data": {"attempt": attempt + 1, "open_sessions": len(self._sessions)}},
        )

    def _exhausted(self) -> NoReturn:
        logger.error(
            "publish token space exhausted",
            extra={
                "data": {
                    "max_attempts": self._max_attempts,
                    "length": self._length,
                    "open_sessions": len(self._sessions),
                }
            },
        )
        raise TokenSpaceExhaustedError(
            f"no free publish token after {self._max_attempts} attempts",
        )


__all__ = ["DEFAULT_MAX_ATTEMPTS", "DEFAULT_TOKEN_LENGTH", "TokenGenerator"]
