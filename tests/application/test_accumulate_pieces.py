from __future__ import annotations

from datetime import timedelta

import pytest

from nest_registry.application.accumulate_pieces import PieceAccumulator
from nest_registry.application.finalize_publish import PublishFinalizer
from nest_registry.domain.package import User
from nest_registry.domain.publish import PublishSession
from nest_registry.errors import (
    BadRequestError,
    FinalizationError,
    NotFoundError,
    UnauthorizedError,
)
from nest_registry.infrastructure.state.session_store import InMemoryPublishSessionStore
from tests.fixtures.fakes import BASE_TIME, FakeClock, FakeContentStore, RecordingCatalog

pytestmark = pytest.mark.anyio

ALICE = User(user_id="alice")
MALLORY = User(user_id="mallory")


def _open(store: InMemoryPublishSessionStore, token: str = "tok1") -> PublishSession:
    session = PublishSession(
        token=token,
        package_name="lib",
        target_version="1.0.0",
        is_update=False,
        description="a library",
        owner_id="alice",
        credential="key-a",
        created_at=BASE_TIME,
        last_activity_at=BASE_TIME,
    )
    store.insert(session)
    return session


def _build(
    *,
    content_store: FakeContentStore | None = None,
    catalog: RecordingCatalog | None = None,
) -> tuple[PieceAccumulator, InMemoryPublishSessionStore, RecordingCatalog, FakeClock]:
    sessions = InMemoryPublishSessionStore()
    resolved_catalog = catalog or RecordingCatalog()
    clock = FakeClock()
    finalizer = PublishFinalizer(
        content_store=content_store or FakeContentStore(),
        catalog=resolved_catalog,
    )
    accumulator = PieceAccumulator(sessions=sessions, finalizer=finalizer, clock=clock)
    return accumulator, sessions, resolved_catalog, clock


async def test_pieces_accumulate_until_end() -> None:
    accumulator, sessions, catalog, clock = _build()
    _open(sessions)

    clock.advance(seconds=10)
    first = await accumulator.add_pieces("tok1", "key-a", ALICE, {"a.js": "A"}, end=False)
    second = await accumulator.add_pieces("tok1", "key-a", ALICE, {"b.js": "B"}, end=False)

    assert first.piece_count == 1
    assert second.piece_count == 2
    assert second.finalized is None
    session = sessions.get("tok1")
    assert session.pieces == {"a.js": "A", "b.js": "B"}
    assert session.last_activity_at == BASE_TIME + timedelta(seconds=10)
    assert catalog.uploads == []


async def test_resent_piece_overwrites_earlier_content() -> None:
    accumulator, sessions, _, _ = _build()
    _open(sessions)

    await accumulator.add_pieces("tok1", "key-a", ALICE, {"a.js": "old"}, end=False)
    await accumulator.add_pieces("tok1", "key-a", ALICE, {"a.js": "new"}, end=False)

    assert sessions.get("tok1").pieces == {"a.js": "new"}


async def test_end_finalizes_and_closes_session() -> None:
    content_store = FakeContentStore()
    accumulator, sessions, catalog, _ = _build(content_store=content_store)
    _open(sessions)

    await accumulator.add_pieces("tok1", "key-a", ALICE, {"a.js": "A"}, end=False)
    receipt = await accumulator.add_pieces("tok1", "key-a", ALICE, {"b.js": "B"}, end=True)

    assert receipt.finalized is not None
    assert receipt.finalized.file_map == {"a.js": "ref-A", "b.js": "ref-B"}
    assert receipt.piece_count == 2
    assert not sessions.contains("tok1")
    assert len(catalog.uploads) == 1

    with pytest.raises(NotFoundError):
        await accumulator.add_pieces("tok1", "key-a", ALICE, {"c.js": "C"}, end=False)


async def test_end_with_no_pieces_publishes_empty_file_map() -> None:
    accumulator, sessions, catalog, _ = _build()
    _open(sessions)

    receipt = await accumulator.add_pieces("tok1", "key-a", ALICE, {}, end=True)

    assert receipt.finalized.file_map == {}
    assert catalog.uploads[0][3].file_map == {}


async def test_unknown_token_is_not_found() -> None:
    accumulator, _, _, _ = _build()

    with pytest.raises(NotFoundError):
        await accumulator.add_pieces("nope", "key-a", ALICE, {"a.js": "A"}, end=False)


async def test_foreign_credential_is_rejected_without_mutation() -> None:
    accumulator, sessions, _, _ = _build()
    _open(sessions)

    with pytest.raises(UnauthorizedError):
        await accumulator.add_pieces("tok1", "key-m", MALLORY, {"evil.js": "X"}, end=True)

    session = sessions.get("tok1")
    assert session is not None
    assert session.pieces == {}


async def test_missing_credential_is_bad_request() -> None:
    accumulator, sessions, _, _ = _build()
    _open(sessions)

    with pytest.raises(BadRequestError):
        await accumulator.add_pieces("tok1", None, None, {"a.js": "A"}, end=False)


async def test_failed_finalization_still_closes_session() -> None:
    accumulator, sessions, catalog, _ = _build(content_store=FakeContentStore(failing={"B"}))
    _open(sessions)

    with pytest.raises(FinalizationError) as excinfo:
        await accumulator.add_pieces("tok1", "key-a", ALICE, {"a.js": "A", "b.js": "B"}, end=True)

    assert excinfo.value.failed_pieces == ("b.js",)
    assert not sessions.contains("tok1")
    assert catalog.uploads == []
