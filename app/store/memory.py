import copy
import logging
import uuid
from typing import Any, Dict, List, Optional

from app.core.errors import StoreNotInitializedError
from app.store.base import DocumentStore, DESCENDING

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local document store.

    Used by the test-suite and for running the API without MongoDB
    (DOCUMENT_STORE=memory). Documents are deep-copied on the way in and out
    so callers never share state with the store.
    """

    def __init__(self):
        self._collections: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None

    async def init(self) -> None:
        if self._collections is None:
            self._collections = {}
        logger.info("[DB] In-memory document store ready")

    async def close(self) -> None:
        self._collections = None
        logger.info("[DB] In-memory document store closed")

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        if self._collections is None:
            raise StoreNotInitializedError()
        return self._collections.setdefault(name, {})

    @staticmethod
    def _out(doc_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        result = copy.deepcopy(doc)
        result["id"] = doc_id
        return result

    @staticmethod
    def _in(value: Dict[str, Any]) -> Dict[str, Any]:
        doc = copy.deepcopy(value)
        doc.pop("id", None)
        return doc

    async def get_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self._collection(collection).get(doc_id)
        return self._out(doc_id, doc) if doc is not None else None

    async def set_by_id(self, collection: str, doc_id: str, value: Dict[str, Any]) -> None:
        self._collection(collection)[doc_id] = self._in(value)

    async def insert(self, collection: str, value: Dict[str, Any]) -> str:
        docs = self._collection(collection)
        doc_id = uuid.uuid4().hex
        docs[doc_id] = self._in(value)
        return doc_id

    async def update_fields(self, collection: str, doc_id: str, partial_value: Dict[str, Any]) -> bool:
        docs = self._collection(collection)
        if doc_id not in docs:
            return False
        docs[doc_id].update(self._in(partial_value))
        return True

    async def delete_by_id(self, collection: str, doc_id: str) -> bool:
        return self._collection(collection).pop(doc_id, None) is not None

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        return [
            self._out(doc_id, doc)
            for doc_id, doc in self._collection(collection).items()
            if doc.get(field) == value
        ]

    async def query_all(self, collection: str) -> List[Dict[str, Any]]:
        return [self._out(doc_id, doc) for doc_id, doc in self._collection(collection).items()]

    async def query_ordered_by(
        self,
        collection: str,
        field: str,
        direction: str = "asc",
        where: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        docs = await self.query_all(collection)
        if where:
            docs = [d for d in docs if all(d.get(k) == v for k, v in where.items())]

        # Descending is the exact reverse of ascending, ties and missing fields included
        present = [d for d in docs if d.get(field) is not None]
        missing = [d for d in docs if d.get(field) is None]
        present.sort(key=lambda d: d[field])
        if direction == DESCENDING:
            return list(reversed(present)) + list(reversed(missing))
        return missing + present
