"""Runtime wiring for the registry service."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from nest_registry.application.accumulate_pieces import PieceAccumulator
from nest_registry.application.finalize_publish import PublishFinalizer
from nest_registry.application.initiate_publish import PublishInitiator
from nest_registry.application.lookup import PackageLookup
from nest_registry.application.ports.auth import AuthenticatorPort
from nest_registry.application.ports.catalog import CatalogPort
from nest_registry.application.ports.content_store import ContentStorePort
from nest_registry.application.tokens import TokenGenerator
from nest_registry.domain.package import User
from nest_registry.infrastructure.auth.api_key import InMemoryApiKeyDirectory
from nest_registry.infrastructure.http.routes import RegistryRouteDeps
from nest_registry.infrastructure.policy.name_filter import BlocklistNamePolicy
from nest_registry.infrastructure.state.catalog import InMemoryCatalog
from nest_registry.infrastructure.state.session_store import InMemoryPublishSessionStore
from nest_registry.infrastructure.storage.content_store import HttpContentStore
from nest_registry.runtime.session_expiry_worker import (
    SessionExpiryWorker,
    create_session_expiry_worker,
)
from nest_registry.runtime.settings import Settings

logger = logging.getLogger("nest_registry.runtime")


@dataclass(frozen=True, slots=True)
class RuntimeContext:
    """Aggregated runtime components for the registry service."""

    settings: Settings
    sessions: InMemoryPublishSessionStore
    catalog: CatalogPort
    content_store: ContentStorePort
    authenticator: AuthenticatorPort
    tokens: TokenGenerator
    initiator: PublishInitiator
    accumulator: PieceAccumulator
    finalizer: PublishFinalizer
    lookup: PackageLookup
    expiry_worker: SessionExpiryWorker
    route_deps_provider: Callable[[], RegistryRouteDeps]


def build_runtime(
    settings: Settings | None = None,
    *,
    catalog: CatalogPort | None = None,
    content_store: ContentStorePort | None = None,
    authenticator: AuthenticatorPort | None = None,
) -> RuntimeContext:
    """Construct the runtime context; collaborators may be injected for tests."""
    resolved = settings or Settings.load()
    logger.info("building registry runtime", extra={"data": {"port": resolved.port}})

    sessions = InMemoryPublishSessionStore()
    resolved_catalog = catalog or InMemoryCatalog()
    resolved_content_store = content_store or _create_content_store(resolved)
    resolved_authenticator = authenticator or _create_authenticator(resolved)

    publish = resolved.publish
    tokens = TokenGenerator(
        sessions,
        length=publish.token_length,
        max_attempts=publish.token_max_attempts,
    )
    name_policy = BlocklistNamePolicy(
        blocked_names=resolved.name_policy.blocked_names,
        blocked_fragments=resolved.name_policy.blocked_fragments,
    )
    initiator = PublishInitiator(
        catalog=resolved_catalog,
        name_policy=name_policy,
        tokens=tokens,
        existing_package_policy=publish.existing_package_policy,
        default_version=publish.default_version,
    )
    finalizer = PublishFinalizer(content_store=resolved_content_store, catalog=resolved_catalog)
    accumulator = PieceAccumulator(sessions=sessions, finalizer=finalizer)
    lookup = PackageLookup(resolved_catalog)
    expiry_worker = create_session_expiry_worker(
        sessions=sessions,
        ttl=publish.session_ttl,
        poll_interval_seconds=publish.sweep_interval_seconds,
    )

    route_deps = RegistryRouteDeps(
        lookup=lookup,
        initiator=initiator,
        accumulator=accumulator,
        authenticator=resolved_authenticator,
        sessions=sessions,
    )

    return RuntimeContext(
        settings=resolved,
        sessions=sessions,
        catalog=resolved_catalog,
        content_store=resolved_content_store,
        authenticator=resolved_authenticator,
        tokens=tokens,
        initiator=initiator,
        accumulator=accumulator,
        finalizer=finalizer,
        lookup=lookup,
        expiry_worker=expiry_worker,
        route_deps_provider=lambda: route_deps,
    )


async def close_runtime_resources(runtime: RuntimeContext) -> None:
    runtime.expiry_worker.stop()
    if isinstance(runtime.content_store, HttpContentStore):
        await runtime.content_store.aclose()


def _create_content_store(settings: Settings) -> HttpContentStore:
    config = settings.content_store
    return HttpContentStore(
        base_url=config.base_url,
        path=config.path,
        timeout=config.timeout_seconds,
        retry_policy=config.retry_policy,
        max_concurrent=config.max_concurrency,
    )


def _create_authenticator(settings: Settings) -> InMemoryApiKeyDirectory:
    keys = {key: User(user_id=user_id, name=user_id) for key, user_id in settings.api_keys.items()}
    if not keys:
        logger.warning("no API keys configured; every publish will be rejected")
    return InMemoryApiKeyDirectory(keys)


__all__ = ["RuntimeContext", "build_runtime", "close_runtime_resources"]
