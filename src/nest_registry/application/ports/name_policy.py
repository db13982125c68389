"""Port describing the package name filter."""

from __future__ import annotations

from typing import Protocol


class NamePolicyPort(Protocol):
    def is_allowed(self, name: str) -> bool:
        """Return ``False`` when ``name`` must not be registered."""


__all__ = ["NamePolicyPort"]
