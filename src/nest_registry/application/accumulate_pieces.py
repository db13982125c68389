"""Use case for staging pieces against an open publish session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from nest_registry.application.access import require_publisher
from nest_registry.application.dto.publish import PieceReceipt
from nest_registry.application.finalize_publish import PublishFinalizer
from nest_registry.application.ports.session_store import PublishSessionStorePort
from nest_registry.domain.package import User
from nest_registry.errors import NotFoundError, UnauthorizedError

logger = logging.getLogger("nest_registry.pieces")


class PieceAccumulator:
    """Merges uploaded pieces into sessions and triggers finalization."""

    def __init__(
        self,
        *,
        sessions: PublishSessionStorePort,
        finalizer: PublishFinalizer,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._sessions = sessions
        self._finalizer = finalizer
        self._clock = clock or (lambda: datetime.now(UTC))

    async def add_pieces(
        self,
        token: str,
        credential: str | None,
        user: User | None,
        pieces: Mapping[str, str],
        *,
        end: bool,
    ) -> PieceReceipt:
        """Stage ``pieces`` under ``token``; commit the session when ``end`` is set."""
        _, api_key = require_publisher(user, credential)

        session = self._sessions.get(token)
        if session is None:
            raise NotFoundError(f"no open publish session for token {token!r}")
        if not session.accepts(api_key):
            logger.warning(
                "piece upload with foreign credential",
                extra={"data": {"token": token, "package": session.package_name}},
            )
            raise UnauthorizedError("API key does not match the publish session")

        updated = self._sessions.merge_pieces(token, pieces, at=self._clock())
        if updated is None:
            # Finalized or expired between lookup and merge.
            raise NotFoundError(f"no open publish session for token {token!r}")
        logger.debug(
            "pieces staged",
            extra={
                "data": {
                    "token": token,
                    "received": len(pieces),
                    "piece_count": len(updated.pieces),
                    "end": end,
                }
            },
        )

        if not end:
            return PieceReceipt(token=token, piece_count=len(updated.pieces))

        final = self._sessions.take(token)
        if final is None:
            raise NotFoundError(f"no open publish session for token {token!r}")
        finalized = await self._finalizer.finalize(final)
        return PieceReceipt(token=token, piece_count=len(final.pieces), finalized=finalized)


__all__ = ["PieceAccumulator"]
