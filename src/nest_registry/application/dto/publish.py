"""Request and result shapes for the publish use cases."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from nest_registry.errors import BadRequestError


class PublishRequest(BaseModel):
    """Body of a publish initiation call."""

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    name: str
    update: bool
    description: str
    version: str | None = None


class PieceRequest(BaseModel):
    """Body of a piece upload call."""

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    token: str
    pieces: dict[str, str]
    end: bool


@dataclass(frozen=True, slots=True)
class FinalizedUpload:
    """Outcome of a committed publish session."""

    package_name: str
    version: str
    file_map: dict[str, str]


@dataclass(frozen=True, slots=True)
class PieceReceipt:
    """Result of a piece upload; ``finalized`` is set on the terminal call."""

    token: str
    piece_count: int
    finalized: FinalizedUpload | None = None


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """Metadata for a single published version."""

    name: str
    version: str
    description: str
    display_name: str


_ModelT = TypeVar("_ModelT", bound=BaseModel)


def parse_publish_request(payload: object) -> PublishRequest:
    """Validate a raw publish body, raising ``BadRequestError`` on shape errors."""
    return _parse(PublishRequest, payload)


def parse_piece_request(payload: object) -> PieceRequest:
    """Validate a raw piece body, raising ``BadRequestError`` on shape errors."""
    return _parse(PieceRequest, payload)


def _parse(model: type[_ModelT], payload: object) -> _ModelT:
    if not isinstance(payload, Mapping):
        raise BadRequestError("request body must be a JSON object")
    try:
        return model.model_validate(dict(payload))
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise BadRequestError(f"invalid fields: {', '.join(fields)}") from exc


__all__ = [
    "FinalizedUpload",
    "PieceReceipt",
    "PieceRequest",
    "PublishRequest",
    "VersionInfo",
    "parse_piece_request",
    "parse_publish_request",
]
