"""In-memory package catalog used for local runs and tests."""

from __future__ import annotations

from dataclasses import replace
from threading import Lock

from nest_registry.application.ports.catalog import CatalogPort
from nest_registry.domain.package import (
    Package,
    PackageSummary,
    Upload,
    UploadDraft,
    display_name,
    summarize,
)
from nest_registry.errors import ConflictError


class InMemoryCatalog(CatalogPort):
    """Stores packages in insertion order for the lifetime of the process."""

    def __init__(self, packages: tuple[Package, ...] = ()) -> None:
        self._packages: dict[str, Package] = {package.name: package for package in packages}
        self._lock = Lock()

    async def get_package(self, name: str) -> Package | None:
        with self._lock:
            return self._packages.get(name)

    async def get_packages(self) -> tuple[PackageSummary, ...]:
        with self._lock:
            packages = tuple(self._packages.values())
        return tuple(summarize(package) for package in packages)

    async def create_upload(
        self,
        name: str,
        is_update: bool,
        owner_id: str,
        draft: UploadDraft,
    ) -> None:
        upload = Upload(
            version=draft.version,
            description=draft.description,
            display_name=display_name(name, draft.version),
            file_map=dict(draft.file_map),
        )
        with self._lock:
            existing = self._packages.get(name)
            if existing is None:
                self._packages[name] = Package(name=name, owner=owner_id, uploads=(upload,))
                return
            if existing.has_version(draft.version):
                raise ConflictError(f"{name}@{draft.version} has already been published")
            self._packages[name] = replace(existing, uploads=(*existing.uploads, upload))


__all__ = ["InMemoryCatalog"]
