from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Collection
from typing import Any
from uuid import uuid4

from fastapi import Request
from fastapi.responses import JSONResponse

from nest_registry.errors import PayloadTooLargeError

logger = logging.getLogger("nest_registry.http")

Middleware = Callable[[Request, Callable[[Request], Awaitable[Any]]], Awaitable[Any]]


async def request_logging_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Any]],
) -> Any:
    """Log one line when a request arrives and one when it completes or fails."""
    context = {
        "request_id": request.headers.get("x-request-id") or uuid4().hex,
        "request_line": _format_request_line(request),
        "method": request.method,
        "path": request.url.path,
    }
    logger.info(
        "request_received",
        extra={"data": {**context, "content_length": _declared_length(request)}},
    )

    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed", extra={"data": context})
        raise

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        "request_completed",
        extra={"data": {**context, "status_code": response.status_code, "duration_ms": elapsed_ms}},
    )
    return response


def payload_limit_middleware(max_bytes: int, *, paths: Collection[str] = ("/piece",)) -> Middleware:
    """Reject bodies above ``max_bytes`` on ``paths`` before any handler runs."""
    if max_bytes <= 0:
        raise ValueError("max_bytes must be positive")
    guarded = frozenset(paths)

    async def enforce_payload_limit(
        request: Request,
        call_next: Callable[[Request], Awaitable[Any]],
    ) -> Any:
        if request.url.path not in guarded:
            return await call_next(request)

        declared = _declared_length(request)
        if declared is not None and declared > max_bytes:
            return _too_large(request, declared, max_bytes)

        body = await request.body()
        if len(body) > max_bytes:
            return _too_large(request, len(body), max_bytes)
        return await call_next(request)

    return enforce_payload_limit


def _too_large(request: Request, size: int, max_bytes: int) -> JSONResponse:
    error = PayloadTooLargeError(f"request body of {size} bytes exceeds the {max_bytes} byte limit")
    logger.warning(
        "payload_rejected",
        extra={"data": {"path": request.url.path, "size": size, "max_bytes": max_bytes}},
    )
    return JSONResponse(
        status_code=error.status_code,
        content={"status": error.status_code, "message": error.message},
    )


def _declared_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    return int(raw) if raw and raw.isdigit() else None


def _format_request_line(request: Request) -> str:
    query = request.url.query
    if query:
        return f"{request.method} {request.url.path}?{query}"
    return f"{request.method} {request.url.path}"


__all__ = ["payload_limit_middleware", "request_logging_middleware"]
