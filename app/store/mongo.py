import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING as MONGO_ASCENDING, DESCENDING as MONGO_DESCENDING

from app.core.errors import StoreNotInitializedError
from app.store.base import DocumentStore, DESCENDING

logger = logging.getLogger(__name__)


def _to_object_id(doc_id: str):
    """Ids created by insert() are ObjectIds; ids given to set_by_id() stay strings"""
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return doc_id


def _convert(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return None
    doc["id"] = str(doc.pop("_id"))
    return doc


class MongoDocumentStore(DocumentStore):
    """DocumentStore backed by MongoDB through Motor"""

    def __init__(self, mongodb_url: str, database_name: str):
        self.mongodb_url = mongodb_url
        self.database_name = database_name
        self.client: Optional[AsyncIOMotorClient] = None

    async def init(self) -> None:
        """Connect to MongoDB"""
        self.client = AsyncIOMotorClient(self.mongodb_url)
        logger.info("[DB] Connected to MongoDB database %s", self.database_name)

        await self.create_indexes()

    async def create_indexes(self) -> None:
        """Create database indexes"""
        db = self._db()

        try:
            await db.assignments.create_index([("intern_id", MONGO_ASCENDING)])
            logger.info("[DB] Created index on assignments.intern_id")
        except Exception as e:
            logger.warning("[DB] Index on assignments.intern_id may already exist: %s", e)

        try:
            await db.submissions.create_index([("assignment_id", MONGO_ASCENDING)])
            logger.info("[DB] Created index on submissions.assignment_id")
        except Exception as e:
            logger.warning("[DB] Index on submissions.assignment_id may already exist: %s", e)

        try:
            await db.submissionHistory.create_index(
                [("submission_id", MONGO_ASCENDING), ("archived_at", MONGO_DESCENDING)]
            )
            logger.info("[DB] Created index on submissionHistory")
        except Exception as e:
            logger.warning("[DB] Index on submissionHistory may already exist: %s", e)

        try:
            await db.logs.create_index([("timestamp", MONGO_DESCENDING)])
            await db.logs.create_index([("entity_type", MONGO_ASCENDING), ("entity_id", MONGO_ASCENDING)])
            logger.info("[DB] Created indexes on logs")
        except Exception as e:
            logger.warning("[DB] Indexes on logs may already exist: %s", e)

    async def close(self) -> None:
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            self.client = None
            logger.info("[DB] Disconnected from MongoDB")

    def _db(self) -> AsyncIOMotorDatabase:
        if self.client is None:
            raise StoreNotInitializedError()
        return self.client[self.database_name]

    async def get_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = await self._db()[collection].find_one({"_id": _to_object_id(doc_id)})
        return _convert(doc)

    async def set_by_id(self, collection: str, doc_id: str, value: Dict[str, Any]) -> None:
        doc = {k: v for k, v in value.items() if k != "id"}
        await self._db()[collection].replace_one({"_id": _to_object_id(doc_id)}, doc, upsert=True)

    async def insert(self, collection: str, value: Dict[str, Any]) -> str:
        doc = {k: v for k, v in value.items() if k != "id"}
        result = await self._db()[collection].insert_one(doc)
        return str(result.inserted_id)

    async def update_fields(self, collection: str, doc_id: str, partial_value: Dict[str, Any]) -> bool:
        fields = {k: v for k, v in partial_value.items() if k != "id"}
        result = await self._db()[collection].update_one(
            {"_id": _to_object_id(doc_id)},
            {"$set": fields}
        )
        return result.matched_count > 0

    async def delete_by_id(self, collection: str, doc_id: str) -> bool:
        result = await self._db()[collection].delete_one({"_id": _to_object_id(doc_id)})
        return result.deleted_count > 0

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        cursor = self._db()[collection].find({field: value})
        return [_convert(doc) for doc in await cursor.to_list(length=None)]

    async def query_all(self, collection: str) -> List[Dict[str, Any]]:
        cursor = self._db()[collection].find({})
        return [_convert(doc) for doc in await cursor.to_list(length=None)]

    async def query_ordered_by(
        self,
        collection: str,
        field: str,
        direction: str = "asc",
        where: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        sort_direction = MONGO_DESCENDING if direction == DESCENDING else MONGO_ASCENDING
        cursor = self._db()[collection].find(where or {}).sort(field, sort_direction)
        return [_convert(doc) for doc in await cursor.to_list(length=None)]
