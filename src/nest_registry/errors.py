"""Publish pipeline exceptions shared across layers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar

BLOCKED_NAME_MESSAGE = (
    "The requested name was blocked. Please contact us if you think this was a mistake."
)


class PublishError(RuntimeError):
    """Base class for failures surfaced to publish callers."""

    status_code: ClassVar[int] = 500
    default_message: ClassVar[str] = "publish failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class BadRequestError(PublishError):
    """Raised for malformed input, naming violations and invalid versions."""

    status_code = 400
    default_message = "bad request"


class NameBlockedError(BadRequestError):
    """Raised when the name policy refuses a package name."""

    default_message = BLOCKED_NAME_MESSAGE


class UnauthorizedError(PublishError):
    """Raised when a credential is unknown or does not own the session."""

    status_code = 401
    default_message = "unauthorized"


class ForbiddenError(PublishError):
    """Raised when a caller updates a package it does not own."""

    status_code = 403
    default_message = "forbidden"


class NotFoundError(PublishError):
    """Raised for unknown packages, versions and session tokens."""

    status_code = 404
    default_message = "not found"


class ConflictError(PublishError):
    """Raised when the requested version has already been published."""

    status_code = 409
    default_message = "version already published"


class PayloadTooLargeError(PublishError):
    """Raised when a piece upload exceeds the configured body size."""

    status_code = 413
    default_message = "payload too large"


class FinalizationError(PublishError):
    """Raised when staged pieces could not be committed.

    The session has already left the store, so the publish attempt is over
    and the client must open a new session.
    """

    status_code = 502
    default_message = "finalization failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        package_name: str,
        version: str,
        failed_pieces: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.package_name = package_name
        self.version = version
        self.failed_pieces = tuple(failed_pieces)


class TokenSpaceExhaustedError(PublishError):
    """Raised when no free session token was found within the retry budget."""

    status_code = 500
    default_message = "unable to allocate a publish token"


__all__ = [
    "BLOCKED_NAME_MESSAGE",
    "BadRequestError",
    "ConflictError",
    "FinalizationError",
    "ForbiddenError",
    "NameBlockedError",
    "NotFoundError",
    "PayloadTooLargeError",
    "PublishError",
    "TokenSpaceExhaustedError",
    "UnauthorizedError",
]
