"""Dataclass schemas for the registry HTTP API."""

from __future__ import annotations

from dataclasses import dataclass

from nest_registry.application.dto.publish import PieceReceipt, VersionInfo
from nest_registry.domain.package import Package, PackageSummary


@dataclass(frozen=True, slots=True)
class UploadModel:
    version: str
    description: str
    displayName: str  # noqa: N815 - wire format
    files: list[str]


@dataclass(frozen=True, slots=True)
class PackageModel:
    name: str
    owner: str
    latestVersion: str | None  # noqa: N815 - wire format
    uploads: list[UploadModel]


@dataclass(frozen=True, slots=True)
class VersionModel:
    name: str
    version: str
    description: str
    displayName: str  # noqa: N815 - wire format


@dataclass(frozen=True, slots=True)
class PackageSummaryModel:
    name: str
    owner: str
    latestVersion: str | None  # noqa: N815 - wire format
    description: str
    versions: list[str]


@dataclass(frozen=True, slots=True)
class PublishResponse:
    token: str


@dataclass(frozen=True, slots=True)
class PieceResponse:
    token: str
    pieces: int
    finalized: bool
    version: str | None = None
    fileMap: dict[str, str] | None = None  # noqa: N815 - wire format


def serialize_package(package: Package) -> PackageModel:
    return PackageModel(
        name=package.name,
        owner=package.owner,
        latestVersion=package.latest_version,
        uploads=[
            UploadModel(
                version=upload.version,
                description=upload.description,
                displayName=upload.display_name,
                files=sorted(upload.file_map),
            )
            for upload in package.uploads
        ],
    )


def serialize_version(info: VersionInfo) -> VersionModel:
    return VersionModel(
        name=info.name,
        version=info.version,
        description=info.description,
        displayName=info.display_name,
    )


def serialize_summary(summary: PackageSummary) -> PackageSummaryModel:
    return PackageSummaryModel(
        name=summary.name,
        owner=summary.owner,
        latestVersion=summary.latest_version,
        description=summary.description,
        versions=list(summary.versions),
    )


def serialize_receipt(receipt: PieceReceipt) -> PieceResponse:
    if receipt.finalized is None:
        return PieceResponse(token=receipt.token, pieces=receipt.piece_count, finalized=False)
    return PieceResponse(
        token=receipt.token,
        pieces=receipt.piece_count,
        finalized=True,
        version=receipt.finalized.version,
        fileMap=dict(receipt.finalized.file_map),
    )


__all__ = [
    "PackageModel",
    "PackageSummaryModel",
    "PieceResponse",
    "PublishResponse",
    "UploadModel",
    "VersionModel",
    "serialize_package",
    "serialize_receipt",
    "serialize_summary",
    "serialize_version",
]
