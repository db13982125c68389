"""Catalog records: packages, their uploads and publishers."""

from __future__ import annotations

from dataclasses import dataclass, field

RESERVED_NAME_SEPARATOR = "@"


@dataclass(frozen=True, slots=True)
class User:
    """Authenticated publisher."""

    user_id: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class Upload:
    """A published version of a package."""

    version: str
    description: str
    display_name: str
    file_map: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Package:
    """Catalog entry with its owner and ordered upload history."""

    name: str
    owner: str
    uploads: tuple[Upload, ...] = ()

    def find_upload(self, version: str) -> Upload | None:
        """Return the upload recorded for ``version``, if any."""
        for upload in self.uploads:
            if upload.version == version:
                return upload
        return None

    def has_version(self, version: str) -> bool:
        return self.find_upload(version) is not None

    @property
    def latest_version(self) -> str | None:
        return self.uploads[-1].version if self.uploads else None


@dataclass(frozen=True, slots=True)
class PackageSummary:
    """Listing view of a package."""

    name: str
    owner: str
    latest_version: str | None
    description: str
    versions: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class UploadDraft:
    """Version payload handed to the catalog when a publish is committed."""

    version: str
    description: str
    file_map: dict[str, str]


def display_name(package_name: str, version: str) -> str:
    """Return the ``name@version`` identifier used for uploads."""
    return f"{package_name}{RESERVED_NAME_SEPARATOR}{version}"


def has_reserved_characters(name: str) -> bool:
    """Return ``True`` when ``name`` contains the version separator or whitespace."""
    return RESERVED_NAME_SEPARATOR in name or any(ch.isspace() for ch in name)


def summarize(package: Package) -> PackageSummary:
    latest = package.uploads[-1] if package.uploads else None
    return PackageSummary(
        name=package.name,
        owner=package.owner,
        latest_version=latest.version if latest else None,
        description=latest.description if latest else "",
        versions=tuple(upload.version for upload in package.uploads),
    )


__all__ = [
    "RESERVED_NAME_SEPARATOR",
    "Package",
    "PackageSummary",
    "Upload",
    "UploadDraft",
    "User",
    "display_name",
    "has_reserved_characters",
    "summarize",
]
