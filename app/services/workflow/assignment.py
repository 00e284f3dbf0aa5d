import json
import logging
from typing import Optional, List, Dict, Any, Union
from datetime import datetime

from app.core.errors import NotFoundError
from app.models.workflow.assignment import (
    Assignment,
    AssignmentCreate,
    AssignmentListItem,
    AssignmentNotes,
    AssignmentStatus,
    BulkAssignmentCreate
)
from app.models.workflow.audit import AuditAction
from app.services.exam.catalog import ExamCatalog
from app.services.workflow.audit import AuditService
from app.store.base import DocumentStore, ASSIGNMENTS

logger = logging.getLogger(__name__)


def parse_notes(notes: Union[str, Dict[str, Any], None]) -> AssignmentNotes:
    """Notes may be stored as a JSON string, a dict, or plain text"""
    if isinstance(notes, dict):
        return AssignmentNotes.model_validate(notes)
    if isinstance(notes, str) and notes.strip():
        try:
            parsed = json.loads(notes)
        except ValueError as e:
            logger.warning("[ASSIGNMENT] Failed to parse notes: %s", e)
            return AssignmentNotes()
        if isinstance(parsed, dict):
            return AssignmentNotes.model_validate(parsed)
    return AssignmentNotes()


class AssignmentService:
    """Service for assignment operations"""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.audit_service = AuditService(store)

    async def create_assignment(
        self,
        main_exam_id: str,
        intern_id: str,
        assigned_by: str,
        due_date: datetime,
        sub_exam_id: Optional[str] = None,
        notes: Union[AssignmentNotes, str, None] = ""
    ) -> str:
        """Create one assignment and return its id"""
        if isinstance(notes, AssignmentNotes):
            notes = notes.model_dump()

        now = datetime.utcnow()
        assignment = {
            "main_exam_id": str(main_exam_id),
            "sub_exam_id": str(sub_exam_id) if sub_exam_id else None,
            "intern_id": intern_id,
            "assigned_by": assigned_by,
            "due_date": due_date,
            "status": AssignmentStatus.ASSIGNED.value,
            "notes": notes if notes is not None else "",
            "history": [
                {
                    "action": AssignmentStatus.ASSIGNED.value,
                    "actor_id": assigned_by,
                    "timestamp": now,
                    "details": {"notes": notes}
                }
            ]
        }

        return await self.store.insert(ASSIGNMENTS, assignment)

    async def assign_work(self, assignment_data: AssignmentCreate, assigned_by: str) -> List[str]:
        """Create one assignment per intern"""
        ids = []
        for intern_id in assignment_data.intern_ids:
            assignment_id = await self.create_assignment(
                main_exam_id=assignment_data.main_exam_id,
                sub_exam_id=assignment_data.sub_exam_id,
                intern_id=intern_id,
                assigned_by=assigned_by,
                due_date=assignment_data.due_date,
                notes=assignment_data.notes
            )
            ids.append(assignment_id)

        await self.audit_service.log_action(
            action=AuditAction.ASSIGNMENT_CREATED,
            actor_id=assigned_by,
            entity_type="assignment",
            entity_id=",".join(ids),
            details={
                "main_exam_id": assignment_data.main_exam_id,
                "sub_exam_id": assignment_data.sub_exam_id,
                "intern_ids": assignment_data.intern_ids,
                "bulk": assignment_data.bulk
            }
        )
        return ids

    async def assign_sub_exams(
        self,
        bulk_data: BulkAssignmentCreate,
        assigned_by: str,
        catalog: ExamCatalog
    ) -> List[str]:
        """
        Assign several sub-exams of one main exam to an intern.
        One assignment per sub-exam, sub_exam_id in "<main>-<sub>" form.
        """
        main_exam = catalog.get_main_exam(bulk_data.main_exam_id)
        if main_exam is None:
            raise NotFoundError("Main exam", str(bulk_data.main_exam_id))

        if bulk_data.sub_exam_ids:
            sub_exams = [s for s in main_exam.sub_exams if s.id in bulk_data.sub_exam_ids]
        else:
            sub_exams = list(main_exam.sub_exams)

        if not sub_exams:
            raise NotFoundError("Sub-exam", message="No sub-exams found to assign")

        ids = []
        for sub_exam in sub_exams:
            assignment_id = await self.create_assignment(
                main_exam_id=str(main_exam.id),
                sub_exam_id=f"{main_exam.id}-{sub_exam.id}",
                intern_id=bulk_data.intern_id,
                assigned_by=assigned_by,
                due_date=bulk_data.due_date,
                notes=json.dumps({
                    "main_exam_name": main_exam.name,
                    "sub_exam_name": sub_exam.name,
                    "sub_exam_code": sub_exam.code
                })
            )
            ids.append(assignment_id)

        await self.audit_service.log_action(
            action=AuditAction.ASSIGNMENTS_BULK_CREATED,
            actor_id=assigned_by,
            entity_type="assignment",
            entity_id=",".join(ids),
            details=(
                f"Assigned {main_exam.name} ({', '.join(s.name for s in sub_exams)}) "
                f"to intern {bulk_data.intern_id} with due date {bulk_data.due_date.date().isoformat()}"
            )
        )
        return ids

    async def get_assignment(self, assignment_id: str) -> Assignment:
        doc = await self.store.get_by_id(ASSIGNMENTS, assignment_id)
        if not doc:
            raise NotFoundError("Assignment", assignment_id)
        return Assignment.model_validate(doc)

    async def get_assignments_for_intern(self, intern_id: str = "") -> List[AssignmentListItem]:
        """Assignments of one intern; an empty intern id lists every assignment"""
        if intern_id:
            docs = await self.store.query_by_field(ASSIGNMENTS, "intern_id", intern_id)
        else:
            docs = await self.store.query_all(ASSIGNMENTS)

        items = []
        for doc in docs:
            notes = parse_notes(doc.get("notes"))
            doc["notes"] = notes
            doc["status"] = doc.get("status") or AssignmentStatus.PENDING.value
            doc["assigned_by"] = doc.get("assigned_by") or "Unknown"
            items.append(AssignmentListItem(
                **doc,
                main_exam_name=notes.main_exam_name or "N/A",
                sub_exam_name=notes.sub_exam_name or "N/A",
                sub_exam_code=notes.sub_exam_code or "N/A"
            ))
        return items

    async def update_assignment_status(
        self,
        assignment_id: str,
        status: Union[AssignmentStatus, str],
        actor_id: str,
        details: Optional[Dict[str, Any]] = None
    ) -> Assignment:
        """
        Set the status and append a history entry.

        Read-modify-write without a version check: concurrent writers end up
        last-write-wins on status.
        """
        status_value = status.value if isinstance(status, AssignmentStatus) else status

        doc = await self.store.get_by_id(ASSIGNMENTS, assignment_id)
        if not doc:
            raise NotFoundError("Assignment", assignment_id)

        history = list(doc.get("history") or [])
        now = datetime.utcnow()
        if history and history[-1].get("timestamp") and history[-1]["timestamp"] > now:
            # Keep timestamps non-decreasing even if the clock steps back
            now = history[-1]["timestamp"]

        history.append({
            "action": status_value,
            "actor_id": actor_id,
            "timestamp": now,
            "details": details or {}
        })

        await self.store.update_fields(ASSIGNMENTS, assignment_id, {
            "status": status_value,
            "history": history
        })

        doc.update({"status": status_value, "history": history})
        return Assignment.model_validate(doc)

    async def delete_assignment(self, assignment_id: str) -> None:
        """Hard delete. Callers write the audit entry first."""
        deleted = await self.store.delete_by_id(ASSIGNMENTS, assignment_id)
        if not deleted:
            raise NotFoundError("Assignment", assignment_id)
