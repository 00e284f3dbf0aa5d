import pytest

from app.core.errors import StoreNotInitializedError
from app.store.base import ASCENDING, DESCENDING
from app.store.memory import InMemoryDocumentStore


async def test_use_before_init_fails_fast():
    store = InMemoryDocumentStore()
    with pytest.raises(StoreNotInitializedError):
        await store.query_all("submissions")


async def test_use_after_close_fails_fast(store):
    await store.close()
    with pytest.raises(StoreNotInitializedError):
        await store.get_by_id("submissions", "abc")


async def test_insert_and_get(store):
    doc_id = await store.insert("assignments", {"intern_id": "intern-1", "tags": ["a"]})
    doc = await store.get_by_id("assignments", doc_id)
    assert doc == {"id": doc_id, "intern_id": "intern-1", "tags": ["a"]}


async def test_documents_are_copied(store):
    value = {"tags": ["a"]}
    doc_id = await store.insert("assignments", value)
    value["tags"].append("b")

    doc = await store.get_by_id("assignments", doc_id)
    doc["tags"].append("c")

    assert (await store.get_by_id("assignments", doc_id))["tags"] == ["a"]


async def test_set_by_id_uses_caller_id(store):
    await store.set_by_id("users", "intern-1", {"email": "a@example.com"})
    assert (await store.get_by_id("users", "intern-1"))["email"] == "a@example.com"


async def test_update_and_delete(store):
    doc_id = await store.insert("assignments", {"status": "assigned"})

    assert await store.update_fields("assignments", doc_id, {"status": "completed"}) is True
    assert (await store.get_by_id("assignments", doc_id))["status"] == "completed"
    assert await store.update_fields("assignments", "missing", {"status": "x"}) is False

    assert await store.delete_by_id("assignments", doc_id) is True
    assert await store.delete_by_id("assignments", doc_id) is False
    assert await store.get_by_id("assignments", doc_id) is None


async def test_query_by_field(store):
    await store.insert("assignments", {"intern_id": "intern-1"})
    await store.insert("assignments", {"intern_id": "intern-2"})
    await store.insert("assignments", {"intern_id": "intern-1"})

    assert len(await store.query_by_field("assignments", "intern_id", "intern-1")) == 2
    assert len(await store.query_all("assignments")) == 3
    assert await store.query_all("empty") == []


async def test_query_ordered_by(store):
    await store.insert("logs", {"n": 2, "kind": "a"})
    await store.insert("logs", {"n": 1, "kind": "a"})
    await store.insert("logs", {"kind": "a"})
    await store.insert("logs", {"n": 3, "kind": "b"})

    ascending = await store.query_ordered_by("logs", "n", ASCENDING)
    assert [d.get("n") for d in ascending] == [None, 1, 2, 3]

    descending = await store.query_ordered_by("logs", "n", DESCENDING, where={"kind": "a"})
    assert [d.get("n") for d in descending] == [2, 1, None]
