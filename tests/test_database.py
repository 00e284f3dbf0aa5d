import pytest
from bson import ObjectId

from app.core.config import Settings
from app.core.errors import ConfigurationError, StoreNotInitializedError
from app.database import Database, build_store
from app.store.memory import InMemoryDocumentStore
from app.store.mongo import MongoDocumentStore, _convert, _to_object_id


def test_build_store_from_settings():
    assert isinstance(build_store(Settings(document_store="memory")), InMemoryDocumentStore)

    store = build_store(Settings(document_store="mongo", database_name="examdata_test"))
    assert isinstance(store, MongoDocumentStore)
    assert store.database_name == "examdata_test"

    with pytest.raises(ConfigurationError):
        build_store(Settings(document_store="sqlite"))


def test_settings_overrides():
    settings = Settings(assignment_id_prefix="task-", log_level="debug")
    assert settings.assignment_id_prefix == "task-"
    assert settings.log_level == "DEBUG"
    assert settings.exam_catalog_path.name == "exams.json"


async def test_mongo_store_fails_fast_before_init():
    store = MongoDocumentStore("mongodb://localhost:27017", "examdata_test")
    with pytest.raises(StoreNotInitializedError):
        await store.get_by_id("submissions", "abc")


def test_object_id_conversion():
    object_id = ObjectId()
    assert _to_object_id(str(object_id)) == object_id
    assert _to_object_id("intern-1") == "intern-1"
    assert _convert({"_id": object_id, "status": "assigned"}) == {"id": str(object_id), "status": "assigned"}
    assert _convert(None) is None


async def test_database_holder_lifecycle(monkeypatch):
    monkeypatch.setattr(Database, "store", None)
    with pytest.raises(StoreNotInitializedError):
        Database.get_store()

    store = InMemoryDocumentStore()
    await Database.connect_db(store=store)
    assert Database.get_store() is store
    assert await store.query_all("logs") == []

    await Database.close_db()
    assert Database.store is None
    with pytest.raises(StoreNotInitializedError):
        await store.query_all("logs")
