"""Port describing publisher authentication."""

from __future__ import annotations

from typing import Protocol

from nest_registry.domain.package import User


class AuthenticatorPort(Protocol):
    """Resolves API keys to publishers."""

    async def resolve(self, credential: str) -> User | None:
        """Return the user owning ``credential``."""


__all__ = ["AuthenticatorPort"]
