"""Port describing the package catalog."""

from __future__ import annotations

from typing import Protocol

from nest_registry.domain.package import Package, PackageSummary, UploadDraft


class CatalogPort(Protocol):
    """Authoritative record of packages, owners and published versions."""

    async def get_package(self, name: str) -> Package | None:
        """Return the package registered under ``name``."""

    async def get_packages(self) -> tuple[PackageSummary, ...]:
        """Return summaries of every registered package."""

    async def create_upload(
        self,
        name: str,
        is_update: bool,
        owner_id: str,
        draft: UploadDraft,
    ) -> None:
        """Durably record a new version of ``name``."""


__all__ = ["CatalogPort"]
