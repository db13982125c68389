from __future__ import annotations

import pytest

from nest_registry.domain.package import (
    Package,
    Upload,
    display_name,
    has_reserved_characters,
    summarize,
)


def _upload(version: str, description: str = "") -> Upload:
    return Upload(
        version=version,
        description=description,
        display_name=display_name("lib", version),
        file_map={"index.js": f"ref-{version}"},
    )


def test_package_tracks_versions_and_latest() -> None:
    package = Package(name="lib", owner="alice", uploads=(_upload("1.0.0"), _upload("1.1.0")))

    assert package.has_version("1.0.0")
    assert not package.has_version("2.0.0")
    assert package.latest_version == "1.1.0"
    assert package.find_upload("1.1.0") is package.uploads[1]


def test_summarize_uses_latest_upload() -> None:
    package = Package(
        name="lib",
        owner="alice",
        uploads=(_upload("1.0.0", "first"), _upload("1.1.0", "second")),
    )

    summary = summarize(package)

    assert summary.latest_version == "1.1.0"
    assert summary.description == "second"
    assert summary.versions == ("1.0.0", "1.1.0")


def test_summarize_empty_package() -> None:
    summary = summarize(Package(name="lib", owner="alice"))

    assert summary.latest_version is None
    assert summary.description == ""
    assert summary.versions == ()


def test_display_name_joins_with_separator() -> None:
    assert display_name("lib", "1.0.0") == "lib@1.0.0"


@pytest.mark.parametrize(("name", "reserved"), [("lib", False), ("my-lib_2", False), ("a@b", True), ("a b", True), ("a\tb", True)])
def test_has_reserved_characters(name: str, reserved: bool) -> None:
    assert has_reserved_characters(name) is reserved
