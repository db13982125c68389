"""Entrypoint for running the registry API service under uvicorn."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nest_registry.infrastructure.http.middleware import (
    payload_limit_middleware,
    request_logging_middleware,
)
from nest_registry.infrastructure.http.routes import add_registry_routes, install_error_handlers
from nest_registry.infrastructure.observability.logging import configure_logging
from nest_registry.infrastructure.observability.tracing import configure_tracing
from nest_registry.runtime.bootstrap import RuntimeContext, build_runtime, close_runtime_resources
from nest_registry.runtime.settings import Settings


def create_app(runtime: RuntimeContext) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        del app
        runtime.expiry_worker.start()
        yield
        await close_runtime_resources(runtime)

    app = FastAPI(title="Nest Registry API", version="0.1.0", lifespan=lifespan)
    # Registered last runs first: log every request, then enforce size.
    app.middleware("http")(
        payload_limit_middleware(runtime.settings.publish.max_piece_payload_bytes)
    )
    app.middleware("http")(request_logging_middleware)

    install_error_handlers(app)
    add_registry_routes(app, runtime.route_deps_provider)
    return app


def main() -> None:
    import uvicorn

    settings = Settings()
    # ENABLE_JSON_LOGS=false still allows managed-runtime detection.
    configure_logging(json_lines=True if settings.observability.enable_json_logs else None)
    runtime = build_runtime(settings)
    configure_tracing(service_name=runtime.settings.observability.service_name)
    config = uvicorn.Config(
        create_app(runtime),
        host=runtime.settings.listen_host,
        port=runtime.settings.port,
        # logging already setup
        log_config=None,
    )
    uvicorn.Server(config).run()


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["create_app", "main"]
