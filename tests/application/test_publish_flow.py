from __future__ import annotations

import pytest

from nest_registry.application.accumulate_pieces import PieceAccumulator
from nest_registry.application.finalize_publish import PublishFinalizer
from nest_registry.application.initiate_publish import PublishInitiator
from nest_registry.application.lookup import PackageLookup
from nest_registry.application.tokens import TokenGenerator
from nest_registry.domain.package import UploadDraft, User
from nest_registry.errors import ConflictError
from nest_registry.infrastructure.state.catalog import InMemoryCatalog
from nest_registry.infrastructure.state.session_store import InMemoryPublishSessionStore
from tests.fixtures.fakes import AllowAllNames, FakeContentStore, RecordingCatalog

pytestmark = pytest.mark.anyio

ALICE = User(user_id="alice")


async def test_publish_then_update_round_trip_through_catalog() -> None:
    sessions = InMemoryPublishSessionStore()
    catalog = InMemoryCatalog()
    content_store = FakeContentStore(references={"console.log(1)": "ref123"})
    initiator = PublishInitiator(
        catalog=catalog,
        name_policy=AllowAllNames(),
        tokens=TokenGenerator(sessions),
    )
    accumulator = PieceAccumulator(
        sessions=sessions,
        finalizer=PublishFinalizer(content_store=content_store, catalog=catalog),
    )
    lookup = PackageLookup(catalog)

    token = await initiator.initiate(
        {"name": "lib", "update": False, "description": "d", "version": "1.0.0"},
        ALICE,
        "key-a",
    )
    receipt = await accumulator.add_pieces(
        token, "key-a", ALICE, {"index.js": "console.log(1)"}, end=True
    )

    assert receipt.finalized.file_map == {"index.js": "ref123"}
    package = await lookup.package("lib")
    assert package.owner == "alice"
    assert package.uploads[0].file_map == {"index.js": "ref123"}
    assert package.uploads[0].display_name == "lib@1.0.0"
    assert len(sessions) == 0

    with pytest.raises(ConflictError):
        await initiator.initiate(
            {"name": "lib", "update": True, "description": "d", "version": "1.0.0"},
            ALICE,
            "key-a",
        )

    token = await initiator.initiate(
        {"name": "lib", "update": True, "description": "d2", "version": "1.1.0"},
        ALICE,
        "key-a",
    )
    await accumulator.add_pieces(token, "key-a", ALICE, {"index.js": "console.log(2)"}, end=True)

    assert (await lookup.package("lib")).latest_version == "1.1.0"
    assert (await lookup.resolve("lib@1.1.0")).description == "d2"


async def test_single_piece_publish_records_exact_upload() -> None:
    sessions = InMemoryPublishSessionStore()
    catalog = RecordingCatalog()
    initiator = PublishInitiator(
        catalog=catalog,
        name_policy=AllowAllNames(),
        tokens=TokenGenerator(sessions),
    )
    accumulator = PieceAccumulator(
        sessions=sessions,
        finalizer=PublishFinalizer(
            content_store=FakeContentStore(references={"export const x = 1;": "ref123"}),
            catalog=catalog,
        ),
    )

    token = await initiator.initiate(
        {"name": "sample", "update": False, "description": "d", "version": "0.0.1"},
        ALICE,
        "key-a",
    )
    await accumulator.add_pieces(token, "key-a", ALICE, {"mod.ts": "export const x = 1;"}, end=True)

    assert catalog.uploads == [
        (
            "sample",
            False,
            "alice",
            UploadDraft(version="0.0.1", description="d", file_map={"mod.ts": "ref123"}),
        )
    ]
