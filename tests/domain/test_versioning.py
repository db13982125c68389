from __future__ import annotations

import pytest

from nest_registry.domain.versioning import is_valid_version, normalize_version


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1.0.0", "1.0.0"),
        ("v1.2.3", "1.2.3"),
        ("=0.0.1", "0.0.1"),
        ("  2.0.0  ", "2.0.0"),
        ("1.0.0-beta.1", "1.0.0-beta.1"),
        ("1.0.0-rc.1+build.5", "1.0.0-rc.1+build.5"),
    ],
)
def test_normalize_version_accepts_semver(raw: str, expected: str) -> None:
    assert normalize_version(raw) == expected


@pytest.mark.parametrize("raw", ["", "1", "1.0", "01.0.0", "1.0.0.0", "latest", "1.0.0-", "1.0.0-01"])
def test_normalize_version_rejects_non_semver(raw: str) -> None:
    assert normalize_version(raw) is None
    assert not is_valid_version(raw)
