from pydantic import BaseModel
from typing import Optional, Any
from datetime import datetime
from enum import Enum


class AuditAction(str, Enum):
    """Audit action types"""
    # Assignment actions
    ASSIGNMENT_CREATED = "assignment_created"
    ASSIGNMENTS_BULK_CREATED = "assignments_bulk_created"
    ASSIGNMENT_STATUS_UPDATED = "assignment_status_updated"
    ASSIGNMENT_DELETED = "assignment_deleted"

    # Submission actions
    EXAM_SUBMISSION = "exam_submission"
    SUBMISSION_UPDATED = "submission_updated"
    SUBMISSION_APPROVED = "submission_approved"

    # User directory actions
    USER_ADDED = "user_added"
    USER_ROLE_UPDATED = "user_role_updated"
    USER_REMOVED = "user_removed"


class LogEntry(BaseModel):
    """Audit trail entry"""
    id: str
    action: str
    actor_id: str
    entity_type: str  # "assignment", "submission", "user"
    entity_id: Optional[str] = None
    details: Optional[Any] = None
    timestamp: datetime
