"""Read-side queries over the package catalog."""

from __future__ import annotations

from nest_registry.application.dto.publish import VersionInfo
from nest_registry.application.ports.catalog import CatalogPort
from nest_registry.domain.package import (
    RESERVED_NAME_SEPARATOR,
    Package,
    PackageSummary,
)
from nest_registry.domain.versioning import normalize_version
from nest_registry.errors import BadRequestError, NotFoundError


class PackageLookup:
    """Resolves ``name`` and ``name@version`` identifiers."""

    def __init__(self, catalog: CatalogPort) -> None:
        self._catalog = catalog

    async def package(self, name: str) -> Package:
        package = await self._catalog.get_package(name)
        if package is None:
            raise NotFoundError(f"package {name!r} not found")
        return package

    async def version(self, name: str, version: str) -> VersionInfo:
        """Return ``name@version``; ``v1.0.0`` and ``1.0.0`` address the same upload."""
        package = await self.package(name)
        upload = package.find_upload(normalize_version(version) or version)
        if upload is None:
            raise NotFoundError(f"{name}@{version} not found")
        return VersionInfo(
            name=package.name,
            version=upload.version,
            description=upload.description,
            display_name=upload.display_name,
        )

    async def resolve(self, package_id: str) -> Package | VersionInfo:
        """Return the package for ``name`` or the version record for ``name@version``."""
        fields = package_id.split(RESERVED_NAME_SEPARATOR)
        if len(fields) == 1:
            return await self.package(package_id)
        if len(fields) > 2:
            raise BadRequestError(f"malformed package identifier {package_id!r}")
        name, version = fields
        return await self.version(name, version)

    async def list_packages(self) -> tuple[PackageSummary, ...]:
        return await self._catalog.get_packages()


__all__ = ["PackageLookup"]
