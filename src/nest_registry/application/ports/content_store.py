"""Port describing the content storage gateway."""

from __future__ import annotations

from typing import Protocol


class ContentStorePort(Protocol):
    """Accepts raw piece content and hands back a stable reference."""

    async def put(self, content: str) -> str:
        """Persist ``content`` and return the reference used to retrieve it."""


__all__ = ["ContentStorePort"]
