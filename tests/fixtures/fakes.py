from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta

from nest_registry.application.ports.content_store import ContentStorePort
from nest_registry.application.ports.name_policy import NamePolicyPort
from nest_registry.domain.package import Package, PackageSummary, UploadDraft, summarize

BASE_TIME = datetime(2026, 3, 1, 12, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeContentStore(ContentStorePort):
    """Records submitted content and returns deterministic references."""

    def __init__(
        self,
        *,
        references: dict[str, str] | None = None,
        failing: Iterable[str] = (),
        delay: float = 0.0,
    ) -> None:
        self._references = dict(references or {})
        self._failing = set(failing)
        self._delay = delay
        self.submitted: list[str] = []

    async def put(self, content: str) -> str:
        if self._delay:
            await asyncio.sleep(self._delay)
        if content in self._failing:
            raise RuntimeError(f"gateway refused {content!r}")
        self.submitted.append(content)
        return self._references.get(content, f"ref-{content}")


class RecordingCatalog:
    """Catalog double that records every call it receives."""

    def __init__(self, packages: Iterable[Package] = (), *, fail_writes: bool = False) -> None:
        self.packages = {package.name: package for package in packages}
        self.fail_writes = fail_writes
        self.lookups: list[str] = []
        self.uploads: list[tuple[str, bool, str, UploadDraft]] = []

    async def get_package(self, name: str) -> Package | None:
        self.lookups.append(name)
        return self.packages.get(name)

    async def get_packages(self) -> tuple[PackageSummary, ...]:
        return tuple(summarize(package) for package in self.packages.values())

    async def create_upload(
        self,
        name: str,
        is_update: bool,
        owner_id: str,
        draft: UploadDraft,
    ) -> None:
        if self.fail_writes:
            raise RuntimeError("catalog offline")
        self.uploads.append((name, is_update, owner_id, draft))


class AllowAllNames(NamePolicyPort):
    def is_allowed(self, name: str) -> bool:
        return True


class DenyNames(NamePolicyPort):
    def __init__(self, *names: str) -> None:
        self._names = set(names)

    def is_allowed(self, name: str) -> bool:
        return name not in self._names


def scripted_source(*tokens: str) -> Callable[[int], str]:
    """Token source that replays ``tokens`` in order, ignoring the requested length."""
    remaining = iter(tokens)

    def source(length: int) -> str:
        del length
        return next(remaining)

    return source
