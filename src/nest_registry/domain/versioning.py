"""Semantic version validation for published packages."""

from __future__ import annotations

import re

# semver.org 2.0.0 grammar; a leading "v" or "=" is tolerated like npm's semver.valid.
_SEMVER_PATTERN = re.compile(
    r"^[v=]?"
    r"(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

DEFAULT_VERSION = "0.0.1"


def normalize_version(value: str) -> str | None:
    """Return the canonical ``major.minor.patch[-pre][+build]`` form or ``None``."""
    match = _SEMVER_PATTERN.match(value.strip())
    if match is None:
        return None
    version = f"{match['major']}.{match['minor']}.{match['patch']}"
    if match["prerelease"]:
        version = f"{version}-{match['prerelease']}"
    if match["build"]:
        version = f"{version}+{match['build']}"
    return version


def is_valid_version(value: str) -> bool:
    return normalize_version(value) is not None


__all__ = ["DEFAULT_VERSION", "is_valid_version", "normalize_version"]
