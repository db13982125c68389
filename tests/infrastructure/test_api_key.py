from __future__ import annotations

import pytest

from nest_registry.domain.package import User
from nest_registry.infrastructure.auth.api_key import InMemoryApiKeyDirectory, extract_api_key


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("key-a", "key-a"),
        ("Bearer key-a", "key-a"),
        ("bearer   key-a ", "key-a"),
        ("", None),
        ("   ", None),
        ("Bearer ", None),
        ("Bearer", None),
        ("BEARER   ", None),
        (None, None),
    ],
)
def test_extract_api_key(header: str | None, expected: str | None) -> None:
    assert extract_api_key(header) == expected


@pytest.mark.anyio
async def test_directory_resolves_configured_keys_only() -> None:
    keys = {"key-a": User(user_id="alice")}
    directory = InMemoryApiKeyDirectory(keys)
    keys["key-b"] = User(user_id="bob")

    assert (await directory.resolve("key-a")).user_id == "alice"
    assert await directory.resolve("key-b") is None
