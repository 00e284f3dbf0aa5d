"""
Document store port.

Every service talks to persistence through this interface. Documents are
plain dicts; documents coming back from the store carry their id under "id".
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

ASCENDING = "asc"
DESCENDING = "desc"


class DocumentStore(ABC):
    """Abstract async document store"""

    @abstractmethod
    async def init(self) -> None:
        """Open connections / prepare collections. Must run before any other call."""

    @abstractmethod
    async def close(self) -> None:
        """Release resources. The store is unusable afterwards."""

    @abstractmethod
    async def get_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document or None"""

    @abstractmethod
    async def set_by_id(self, collection: str, doc_id: str, value: Dict[str, Any]) -> None:
        """Upsert a document under a caller-chosen id"""

    @abstractmethod
    async def insert(self, collection: str, value: Dict[str, Any]) -> str:
        """Insert with an auto-generated id and return it"""

    @abstractmethod
    async def update_fields(self, collection: str, doc_id: str, partial_value: Dict[str, Any]) -> bool:
        """Overwrite the given top-level fields. Returns False when the document is missing."""

    @abstractmethod
    async def delete_by_id(self, collection: str, doc_id: str) -> bool:
        """Hard delete. Returns False when nothing was deleted."""

    @abstractmethod
    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        """All documents whose field equals value"""

    @abstractmethod
    async def query_all(self, collection: str) -> List[Dict[str, Any]]:
        """Every document of a collection"""

    @abstractmethod
    async def query_ordered_by(
        self,
        collection: str,
        field: str,
        direction: str = ASCENDING,
        where: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Documents sorted by field, optionally filtered by equality on other fields"""


# Collection names
USERS = "users"
EXAMS = "exams"
ASSIGNMENTS = "assignments"
SUBMISSIONS = "submissions"
FINAL_SUBMISSIONS = "finalSubmissions"
LOGS = "logs"
SUBMISSION_HISTORY = "submissionHistory"
