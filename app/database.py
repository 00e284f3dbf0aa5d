import logging
from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.core.errors import ConfigurationError, StoreNotInitializedError
from app.store.base import DocumentStore
from app.store.memory import InMemoryDocumentStore
from app.store.mongo import MongoDocumentStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> DocumentStore:
    """Create the document store selected by DOCUMENT_STORE"""
    if settings.document_store == "mongo":
        return MongoDocumentStore(settings.mongodb_url, settings.database_name)
    if settings.document_store == "memory":
        return InMemoryDocumentStore()
    raise ConfigurationError(f"Unknown DOCUMENT_STORE: {settings.document_store}")


class Database:
    """Holds the process document store between startup and shutdown"""
    store: Optional[DocumentStore] = None

    @classmethod
    async def connect_db(cls, settings: Optional[Settings] = None, store: Optional[DocumentStore] = None):
        """Create and initialize the document store"""
        cls.store = store or build_store(settings or default_settings)
        await cls.store.init()

    @classmethod
    async def close_db(cls):
        """Close the document store"""
        if cls.store:
            await cls.store.close()
            cls.store = None

    @classmethod
    def get_store(cls) -> DocumentStore:
        """Get the store, failing fast when startup did not initialize it"""
        if cls.store is None:
            raise StoreNotInitializedError()
        return cls.store


async def get_store() -> DocumentStore:
    """Dependency to get the document store"""
    return Database.get_store()
