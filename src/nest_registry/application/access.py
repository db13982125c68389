"""Credential checks shared by the publish use cases."""

from __future__ import annotations

from nest_registry.domain.package import User
from nest_registry.errors import BadRequestError, UnauthorizedError


def require_publisher(user: User | None, credential: str | None) -> tuple[User, str]:
    """Return the caller and its credential, or raise the matching rejection.

    A missing credential is a malformed request; a credential that resolves
    to nobody is an authentication failure.
    """
    if not credential:
        raise BadRequestError("missing API key")
    if user is None:
        raise UnauthorizedError("API key does not belong to a known user")
    return user, credential


__all__ = ["require_publisher"]
