"""API key extraction and a static key directory."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from nest_registry.application.ports.auth import AuthenticatorPort
from nest_registry.domain.package import User

_BEARER_SCHEME = "bearer"


def extract_api_key(authorization: str | None) -> str | None:
    """Return the key from an ``Authorization`` header (bare or ``Bearer``).

    A header naming the scheme without a key counts as no key at all.
    """
    if authorization is None:
        return None
    scheme, _, rest = authorization.strip().partition(" ")
    if scheme.lower() == _BEARER_SCHEME:
        return rest.strip() or None
    return authorization.strip() or None


class InMemoryApiKeyDirectory(AuthenticatorPort):
    """Maps API keys to publishers; the mapping is fixed at construction."""

    def __init__(self, keys: Mapping[str, User] | None = None) -> None:
        self._keys: Mapping[str, User] = MappingProxyType(dict(keys or {}))

    async def resolve(self, credential: str) -> User | None:
        return self._keys.get(credential)


__all__ = ["InMemoryApiKeyDirectory", "extract_api_key"]
