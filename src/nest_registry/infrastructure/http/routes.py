"""HTTP route definitions for the registry API."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, FastAPI, Request, Security
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader

from nest_registry.application.access import require_publisher
from nest_registry.application.accumulate_pieces import PieceAccumulator
from nest_registry.application.dto.publish import parse_piece_request
from nest_registry.application.initiate_publish import PublishInitiator
from nest_registry.application.lookup import PackageLookup
from nest_registry.application.ports.auth import AuthenticatorPort
from nest_registry.application.ports.session_store import PublishSessionStorePort
from nest_registry.domain.package import Package, User
from nest_registry.errors import BadRequestError, FinalizationError, PublishError
from nest_registry.infrastructure.auth.api_key import extract_api_key
from nest_registry.infrastructure.http.schemas import (
    PackageModel,
    PackageSummaryModel,
    PieceResponse,
    PublishResponse,
    VersionModel,
    serialize_package,
    serialize_receipt,
    serialize_summary,
    serialize_version,
)

logger = logging.getLogger("nest_registry.http")


@dataclass(frozen=True)
class RegistryRouteDeps:
    lookup: PackageLookup
    initiator: PublishInitiator
    accumulator: PieceAccumulator
    authenticator: AuthenticatorPort
    sessions: PublishSessionStorePort


@dataclass(frozen=True)
class Caller:
    credential: str | None
    user: User | None


def add_registry_routes(app: FastAPI, dependency_provider: Callable[[], RegistryRouteDeps]) -> None:
    def get_dependencies() -> RegistryRouteDeps:
        return dependency_provider()

    api_key_header = APIKeyHeader(name="Authorization", scheme_name="ApiKey", auto_error=False)

    async def resolve_caller(
        deps: RegistryRouteDeps = Depends(get_dependencies),  # noqa: B008
        authorization: str | None = Security(api_key_header),
    ) -> Caller:
        credential = extract_api_key(authorization)
        user = await deps.authenticator.resolve(credential) if credential else None
        return Caller(credential=credential, user=user)

    @app.get(
        "/info/{package_id}",
        response_model=None,
        description="Return a package, or a single version when addressed as name@version.",
    )
    async def info(
        package_id: str,
        deps: RegistryRouteDeps = Depends(get_dependencies),  # noqa: B008
    ) -> PackageModel | VersionModel:
        resolved = await deps.lookup.resolve(package_id)
        if isinstance(resolved, Package):
            return serialize_package(resolved)
        return serialize_version(resolved)

    @app.get(
        "/packages",
        response_model=list[PackageSummaryModel],
        description="List every package in the catalog.",
    )
    async def packages(
        deps: RegistryRouteDeps = Depends(get_dependencies),  # noqa: B008
    ) -> list[PackageSummaryModel]:
        return [serialize_summary(summary) for summary in await deps.lookup.list_packages()]

    @app.post(
        "/publish",
        response_model=PublishResponse,
        description="Open a publish session and return its token.",
    )
    async def publish(
        request: Request,
        deps: RegistryRouteDeps = Depends(get_dependencies),  # noqa: B008
        caller: Caller = Security(resolve_caller),
    ) -> PublishResponse:
        require_publisher(caller.user, caller.credential)
        body = await _read_json(request)
        token = await deps.initiator.initiate(body, caller.user, caller.credential)
        return PublishResponse(token=token)

    @app.post(
        "/piece",
        response_model=PieceResponse,
        response_model_exclude_none=True,
        description="Stage pieces for an open publish session; end=true commits it.",
    )
    async def piece(
        request: Request,
        deps: RegistryRouteDeps = Depends(get_dependencies),  # noqa: B008
        caller: Caller = Security(resolve_caller),
    ) -> PieceResponse:
        require_publisher(caller.user, caller.credential)
        payload = parse_piece_request(await _read_json(request))
        receipt = await deps.accumulator.add_pieces(
            payload.token,
            caller.credential,
            caller.user,
            payload.pieces,
            end=payload.end,
        )
        return serialize_receipt(receipt)

    @app.get("/healthz", tags=["health"], description="Registry health check.")
    async def health(
        deps: RegistryRouteDeps = Depends(get_dependencies),  # noqa: B008
    ) -> dict[str, Any]:
        return {"status": "ok", "open_sessions": len(deps.sessions)}


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PublishError)
    async def handle_publish_error(request: Request, exc: PublishError) -> JSONResponse:
        log = logger.error if isinstance(exc, FinalizationError) or exc.status_code >= 500 else logger.info
        log(
            "publish_error",
            extra={
                "data": {
                    "path": request.url.path,
                    "status_code": exc.status_code,
                    "error": type(exc).__name__,
                    "detail": exc.message,
                }
            },
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": exc.status_code, "message": exc.message},
        )


async def _read_json(request: Request) -> object:
    raw = await request.body()
    if not raw:
        raise BadRequestError("request body must be a JSON object")
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise BadRequestError("request body is not valid JSON") from exc


__all__ = ["Caller", "RegistryRouteDeps", "add_registry_routes", "install_error_handlers"]
