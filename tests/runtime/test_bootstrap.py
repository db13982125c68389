from __future__ import annotations

import pytest

from nest_registry.infrastructure.auth.api_key import InMemoryApiKeyDirectory
from nest_registry.infrastructure.storage.content_store import HttpContentStore
from nest_registry.runtime.bootstrap import build_runtime, close_runtime_resources
from nest_registry.runtime.settings import Settings

pytestmark = pytest.mark.anyio


async def test_build_runtime_wires_configured_collaborators(monkeypatch) -> None:
    monkeypatch.setenv("NEST_REGISTRY_API_KEYS", "key-a:alice")
    monkeypatch.setenv("CONTENT_STORE_URL", "https://gateway.example")

    runtime = build_runtime(Settings())
    try:
        assert isinstance(runtime.content_store, HttpContentStore)
        assert isinstance(runtime.authenticator, InMemoryApiKeyDirectory)
        assert (await runtime.authenticator.resolve("key-a")).user_id == "alice"
        assert runtime.route_deps_provider().sessions is runtime.sessions
    finally:
        await close_runtime_resources(runtime)
