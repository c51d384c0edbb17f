from collections.abc import AsyncIterator

import pytest

from orderflow.store import MemoryStore, RecordStore, SQLAlchemyStore, create_database

from tests.factories import err, ok


@pytest.fixture(params=["memory", "sqlalchemy"])
async def backend(request, sqlite_url: str) -> AsyncIterator[RecordStore]:
    if request.param == "memory":
        yield MemoryStore()
        return
    session_factory, engine = await create_database(sqlite_url)
    try:
        yield SQLAlchemyStore(session_factory)
    finally:
        await engine.dispose()


async def test_insert_get_list_delete(backend: RecordStore):
    first = ok(await backend.insert("things", {"id": "a", "n": 1}))
    assert first == {"id": "a", "n": 1}
    generated = ok(await backend.insert("things", {"n": 2}))
    assert generated["id"]

    assert ok(await backend.get("things", "a")) == {"id": "a", "n": 1}
    assert ok(await backend.get("things", "zzz")) is None
    assert sorted(r["n"] for r in ok(await backend.list_all("things"))) == [1, 2]
    assert ok(await backend.list_all("other")) == []

    assert ok(await backend.delete("things", "a")) is True
    assert ok(await backend.delete("things", "a")) is False
    assert ok(await backend.get("things", "a")) is None


async def test_duplicate_insert_fails(backend: RecordStore):
    ok(await backend.insert("things", {"id": "a"}))
    e = err(await backend.insert("things", {"id": "a"}))
    assert e.code == "STORE_ERROR"


async def test_tables_are_separate(backend: RecordStore):
    ok(await backend.insert("one", {"id": "x", "v": 1}))
    ok(await backend.insert("two", {"id": "x", "v": 2}))
    assert ok(await backend.get("two", "x"))["v"] == 2


async def test_update_merges_patch(backend: RecordStore):
    ok(await backend.insert("things", {"id": "a", "n": 1, "tag": "x"}))
    updated = ok(await backend.update("things", "a", {"n": 5, "id": "other"}))
    assert updated == {"id": "a", "n": 5, "tag": "x"}
    assert ok(await backend.update("things", "missing", {"n": 1})) is None


async def test_update_if_is_compare_and_swap(backend: RecordStore):
    ok(await backend.insert("orders", {"id": "o", "driver": None, "status": "Em Preparo"}))

    won = ok(await backend.update_if("orders", "o", {"driver": None}, {"driver": "d1"}))
    assert won is not None
    assert won["driver"] == "d1"

    lost = ok(await backend.update_if("orders", "o", {"driver": None}, {"driver": "d2"}))
    assert lost is None
    assert ok(await backend.get("orders", "o"))["driver"] == "d1"


async def test_missing_field_compares_as_none(backend: RecordStore):
    ok(await backend.insert("orders", {"id": "o"}))
    assert ok(await backend.update_if("orders", "o", {"driver": None}, {"driver": "d1"})) is not None


async def test_records_are_copies():
    store = MemoryStore({"things": [{"id": "a", "tags": ["x"]}]})
    record = ok(await store.get("things", "a"))
    record["tags"].append("y")
    assert ok(await store.get("things", "a"))["tags"] == ["x"]


async def test_sql_store_persists_across_sessions(sqlite_url: str):
    session_factory, engine = await create_database(sqlite_url)
    ok(await SQLAlchemyStore(session_factory).insert("things", {"id": "a", "n": 1}))
    await engine.dispose()

    session_factory, engine = await create_database(sqlite_url)
    try:
        assert ok(await SQLAlchemyStore(session_factory).get("things", "a")) == {"id": "a", "n": 1}
    finally:
        await engine.dispose()

