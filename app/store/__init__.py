from app.store.base import DocumentStore, ASCENDING, DESCENDING
from app.store.memory import InMemoryDocumentStore
from app.store.mongo import MongoDocumentStore

__all__ = [
    "DocumentStore",
    "ASCENDING",
    "DESCENDING",
    "InMemoryDocumentStore",
    "MongoDocumentStore"
]
