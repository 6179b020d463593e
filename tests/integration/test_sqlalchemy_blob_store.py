"""Integration tests for SQLAlchemyBlobStore on a temporary SQLite file."""

import pytest

from reflection.application.services import EntityStore
from reflection.domain.entities import Activity
from reflection.infrastructure.database import (
    SQLAlchemyBlobStore,
    build_engine,
    build_session_factory,
    init_database,
)


async def _blob_store(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'reflection.db'}")
    await init_database(engine)
    return engine, SQLAlchemyBlobStore(build_session_factory(engine))


@pytest.mark.asyncio
async def test_save_load_upsert_delete(tmp_path):
    engine, blobs = await _blob_store(tmp_path)
    try:
        assert await blobs.load("activities") is None

        await blobs.save("activities", b"[]")
        await blobs.save("activities", b'[{"x": 1}]')
        assert await blobs.load("activities") == b'[{"x": 1}]'

        assert await blobs.delete("activities") is True
        assert await blobs.delete("activities") is False
        assert await blobs.load("activities") is None
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_entity_store_survives_new_engine(tmp_path, clock):
    engine, blobs = await _blob_store(tmp_path)
    try:
        store = await EntityStore.open(blobs, clock=clock)
        write = await store.add_activity(Activity(name="Write"))
        await store.add_session_to_today(write.id, clock(), 300)
        plan_id = store.current_plan_id
    finally:
        await engine.dispose()

    engine, blobs = await _blob_store(tmp_path)
    try:
        reopened = await EntityStore.open(blobs, clock=clock)
        assert reopened.get_activity(write.id).name == "Write"
        assert reopened.current_plan_id == plan_id
        assert reopened.total_time_for_activity(write.id) == 300
    finally:
        await engine.dispose()
