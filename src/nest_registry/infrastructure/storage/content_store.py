"""HTTP client adapter for the content storage gateway."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx
from opentelemetry import trace
from opentelemetry.trace import SpanKind

from nest_registry.application.ports.content_store import ContentStorePort
from nest_registry.infrastructure.retry import RetryPolicy

_LOGGER = logging.getLogger("nest_registry.content_store.calls")

class ContentStoreError(RuntimeError):
    """Raised when the gateway does not hand back a reference."""


class HttpContentStore(ContentStorePort):
    """Posts raw piece content to the gateway; the response body is the reference."""

    def __init__(
        self,
        *,
        base_url: str,
        path: str = "/",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        max_concurrent: int | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("content store base_url must not be empty")
        self._path = path if path.startswith("/") else f"/{path}"
        self._owns_client = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )
        self._retry_policy = retry_policy or RetryPolicy()
        self._semaphore: asyncio.Semaphore | None = (
            asyncio.Semaphore(max_concurrent) if max_concurrent and max_concurrent > 0 else None
        )

    async def put(self, content: str) -> str:
        if self._semaphore is None:
            return await self._put_with_retries(content)
        async with self._semaphore:
            return await self._put_with_retries(content)

    async def _put_with_retries(self, content: str) -> str:
        body = content.encode("utf-8")
        tracer = trace.get_tracer("nest_registry.content_store")
        with tracer.start_as_current_span(
            "content_store.put",
            kind=SpanKind.CLIENT,
            attributes={
                "http.method": "POST",
                "http.target": self._path,
                "content_store.bytes": len(body),
            },
        ) as span:
            start = time.perf_counter()
            reasons: list[str] = []
            for attempt in range(self._retry_policy.attempts):
                try:
                    response = await self._client.post(
                        self._path,
                        content=body,
                        headers={"Content-Type": "application/octet-stream"},
                    )
                    response.raise_for_status()
                except (httpx.HTTPStatusError, httpx.TransportError) as exc:
                    if not self._retry_policy.should_retry(exc, attempt):
                        span.set_attributes({"content_store.error": type(exc).__name__})
                        raise ContentStoreError(
                            f"content store rejected piece after {attempt + 1} attempt(s): {exc}",
                        ) from exc
                    reasons.append(_reason(exc))
                    await asyncio.sleep(self._retry_policy.delay_seconds(attempt))
                    continue

                reference = response.text.strip()
                if not reference:
                    raise ContentStoreError("content store returned an empty reference")
                span.set_attributes({"http.status_code": response.status_code})
                _LOGGER.debug(
                    "content_store.put.complete",
                    extra={
                        "data": {
                            "bytes": len(body),
                            "status_code": response.status_code,
                            "attempts": attempt + 1,
                            "retry_reasons": tuple(reasons),
                            "latency_ms_total": round((time.perf_counter() - start) * 1000, 2),
                        }
                    },
                )
                return reference
        raise ContentStoreError("content store retry policy allows no attempts")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _reason(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"status_{exc.response.status_code}"
    return type(exc).__name__


__all__ = ["ContentStoreError", "HttpContentStore"]
