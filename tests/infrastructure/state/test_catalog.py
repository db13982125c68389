from __future__ import annotations

import pytest

from nest_registry.domain.package import UploadDraft
from nest_registry.errors import ConflictError
from nest_registry.infrastructure.state.catalog import InMemoryCatalog

pytestmark = pytest.mark.anyio


def _draft(version: str) -> UploadDraft:
    return UploadDraft(version=version, description=f"v{version}", file_map={"index.js": "ref"})


async def test_create_upload_creates_then_appends() -> None:
    catalog = InMemoryCatalog()

    await catalog.create_upload("lib", False, "alice", _draft("1.0.0"))
    await catalog.create_upload("lib", True, "alice", _draft("1.1.0"))

    package = await catalog.get_package("lib")
    assert package.owner == "alice"
    assert [upload.version for upload in package.uploads] == ["1.0.0", "1.1.0"]
    assert package.uploads[1].display_name == "lib@1.1.0"


async def test_create_upload_rejects_duplicate_version() -> None:
    catalog = InMemoryCatalog()
    await catalog.create_upload("lib", False, "alice", _draft("1.0.0"))

    with pytest.raises(ConflictError):
        await catalog.create_upload("lib", True, "alice", _draft("1.0.0"))


async def test_get_packages_lists_in_insertion_order() -> None:
    catalog = InMemoryCatalog()
    await catalog.create_upload("b-lib", False, "bob", _draft("1.0.0"))
    await catalog.create_upload("a-lib", False, "alice", _draft("0.1.0"))

    summaries = await catalog.get_packages()

    assert [summary.name for summary in summaries] == ["b-lib", "a-lib"]
    assert await catalog.get_package("missing") is None
