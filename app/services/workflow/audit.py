import logging
from typing import Optional, Any, List
from datetime import datetime

from app.models.workflow.audit import AuditAction, LogEntry
from app.store.base import DocumentStore, LOGS, ASCENDING, DESCENDING

logger = logging.getLogger(__name__)


class AuditService:
    """Service for audit trail logging"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def log_action(
        self,
        action: AuditAction,
        actor_id: str,
        entity_type: str,
        entity_id: Optional[str] = None,
        details: Optional[Any] = None
    ) -> Optional[str]:
        """
        Append an audit trail entry.

        Failures are logged and reported as None; the action being audited has
        already happened and is not rolled back.
        """
        try:
            entry = {
                "action": action.value if isinstance(action, AuditAction) else action,
                "actor_id": actor_id,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "details": details,
                "timestamp": datetime.utcnow()
            }
            return await self.store.insert(LOGS, entry)

        except Exception as e:
            logger.error("[AUDIT] Error logging %s on %s %s: %s", action, entity_type, entity_id, e)
            return None

    async def get_all_logs(self, limit: Optional[int] = None) -> List[LogEntry]:
        """All audit entries, newest first"""
        docs = await self.store.query_ordered_by(LOGS, "timestamp", DESCENDING)
        if limit:
            docs = docs[:limit]
        return [LogEntry.model_validate(doc) for doc in docs]

    async def get_entity_history(self, entity_type: str, entity_id: str) -> List[LogEntry]:
        """Complete audit history of one entity, oldest first"""
        docs = await self.store.query_ordered_by(
            LOGS,
            "timestamp",
            ASCENDING,
            where={"entity_type": entity_type, "entity_id": entity_id}
        )
        return [LogEntry.model_validate(doc) for doc in docs]
