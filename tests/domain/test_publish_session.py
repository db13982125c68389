from __future__ import annotations

from datetime import timedelta

import pytest

from nest_registry.domain.publish import PublishSession
from tests.fixtures.fakes import BASE_TIME


def make_session(**overrides: object) -> PublishSession:
    fields: dict[str, object] = {
        "token": "tok12345",
        "package_name": "lib",
        "target_version": "1.0.0",
        "is_update": False,
        "description": "a library",
        "owner_id": "alice",
        "credential": "key-a",
        "created_at": BASE_TIME,
        "last_activity_at": BASE_TIME,
    }
    fields.update(overrides)
    return PublishSession(**fields)  # type: ignore[arg-type]


def test_with_pieces_overwrites_same_name_and_refreshes_activity() -> None:
    session = make_session(pieces={"a.js": "old", "b.js": "keep"})
    later = BASE_TIME + timedelta(seconds=5)

    updated = session.with_pieces({"a.js": "new", "c.js": "added"}, at=later)

    assert updated.pieces == {"a.js": "new", "b.js": "keep", "c.js": "added"}
    assert updated.last_activity_at == later
    assert session.pieces == {"a.js": "old", "b.js": "keep"}


def test_with_pieces_never_moves_activity_backwards() -> None:
    later = BASE_TIME + timedelta(minutes=1)
    session = make_session(last_activity_at=later)

    updated = session.with_pieces({"a.js": "x"}, at=BASE_TIME)

    assert updated.last_activity_at == later


def test_is_idle_after_ttl() -> None:
    session = make_session()
    ttl = timedelta(minutes=15)

    assert not session.is_idle(now=BASE_TIME + timedelta(minutes=14), ttl=ttl)
    assert session.is_idle(now=BASE_TIME + ttl, ttl=ttl)


def test_accepts_only_opening_credential() -> None:
    session = make_session()

    assert session.accepts("key-a")
    assert not session.accepts("key-b")


@pytest.mark.parametrize(
    "overrides",
    [
        {"token": ""},
        {"package_name": ""},
        {"last_activity_at": BASE_TIME - timedelta(seconds=1)},
    ],
)
def test_session_rejects_invalid_fields(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        make_session(**overrides)
