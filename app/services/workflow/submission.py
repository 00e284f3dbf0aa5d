import copy
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.core.errors import NotFoundError
from app.models.workflow.assignment import AssignmentStatus
from app.models.workflow.audit import AuditAction
from app.models.workflow.submission import Submission, SubmissionStatus, DeviceInfo
from app.services.workflow.assignment import AssignmentService
from app.services.workflow.audit import AuditService
from app.services.workflow.version_history import VersionHistoryService
from app.store.base import DocumentStore, SUBMISSIONS, FINAL_SUBMISSIONS
from app.utils.form_data import normalize_blank_values

logger = logging.getLogger(__name__)

APPROVAL_REASON = "Submission approved for training data"


def build_submission_metadata(
    timestamp: datetime,
    intern_id: Optional[str],
    device_info: Optional[DeviceInfo]
) -> Dict[str, Any]:
    """Metadata block attached to every new submission"""
    device_info = device_info or DeviceInfo()
    screen = device_info.screen_size

    return {
        "created_at": timestamp,
        "updated_at": timestamp,
        "intern_id": intern_id or "unknown",
        "admin_approved": False,
        "version": 1,
        "source": "intern_submission",
        "submission_environment": {
            "timestamp": timestamp,
            "date": timestamp.date().isoformat(),
            "time": timestamp.strftime("%H:%M:%S"),
            "browser": device_info.browser or "unknown",
            "os": device_info.os or "unknown",
            "device": device_info.device or "unknown",
            "screen_width": screen.width if screen else None,
            "screen_height": screen.height if screen else None,
            "viewport_width": screen.viewport_width if screen else None,
            "viewport_height": screen.viewport_height if screen else None
        },
        "data_quality": {
            "completeness": None,  # Filled in by an admin during review
            "verified": False,
            "needs_review": True
        },
        "training_data_status": "pending_review"
    }


class SubmissionService:
    """Service for exam form submissions"""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.audit_service = AuditService(store)
        self.version_history = VersionHistoryService(store)
        self.assignment_service = AssignmentService(store)

    async def submit_exam_form(
        self,
        assignment_id: str,
        form_data: Dict[str, Any],
        intern_id: Optional[str] = None,
        intern_notes: Optional[str] = "",
        device_info: Optional[DeviceInfo] = None
    ) -> str:
        """
        Store an intern's form and return the submission id.

        The audit entry is written after the submission; if it fails the
        submission still stands.
        """
        timestamp = datetime.utcnow()
        processed = normalize_blank_values(form_data) or {}
        processed["metadata"] = build_submission_metadata(timestamp, intern_id, device_info)
        device = processed["metadata"]["submission_environment"]["device"]

        submission = {
            "assignment_id": assignment_id,
            "form_data": processed,
            "status": SubmissionStatus.SUBMITTED.value,
            "intern_notes": intern_notes or "",
            "admin_notes": "",
            "feedback_notes": "",
            "admin_approved": False,
            "created_at": timestamp,
            "updated_at": timestamp,
            "history": [
                {
                    "action": SubmissionStatus.SUBMITTED.value,
                    "actor_id": intern_id or "intern",
                    "timestamp": timestamp,
                    "details": {
                        "intern_notes": intern_notes or "",
                        "source": "intern_submission",
                        "device": device
                    }
                }
            ]
        }

        submission_id = await self.store.insert(SUBMISSIONS, submission)

        await self.audit_service.log_action(
            action=AuditAction.EXAM_SUBMISSION,
            actor_id=intern_id or "unknown_intern",
            entity_type="submission",
            entity_id=submission_id,
            details={
                "assignment_id": assignment_id,
                "timestamp": timestamp,
                "status": SubmissionStatus.SUBMITTED.value,
                "device": device
            }
        )

        return submission_id

    async def get_submission(self, submission_id: str) -> Submission:
        doc = await self.store.get_by_id(SUBMISSIONS, submission_id)
        if not doc:
            raise NotFoundError("Submission", submission_id)
        return Submission.model_validate(doc)

    async def get_submissions_for_assignment(self, assignment_id: str) -> List[Submission]:
        docs = await self.store.query_by_field(SUBMISSIONS, "assignment_id", assignment_id)
        return [Submission.model_validate(doc) for doc in docs]

    async def _archive_tolerant(self, submission_id: str, actor_id: str, reason: str) -> None:
        """Archive the current version; a failure is logged and the caller carries on"""
        try:
            await self.version_history.archive_submission_version(submission_id, actor_id, reason)
        except Exception as e:
            logger.error("[HISTORY] Error archiving submission %s version: %s", submission_id, e)

    async def update_submission(
        self,
        submission_id: str,
        status: str,
        actor_id: str,
        admin_notes: Optional[str] = None,
        feedback_notes: Optional[str] = None,
        change_reason: Optional[str] = None
    ) -> Submission:
        """
        Generic status update.

        Any status string is accepted, including further writes after
        "approved". The current version is archived before the update.
        """
        prev = await self.store.get_by_id(SUBMISSIONS, submission_id)
        if not prev:
            raise NotFoundError("Submission", submission_id)

        timestamp = datetime.utcnow()
        reason = change_reason or f"Status updated to {status}"

        # A failed archive does not block the update, so a version can go unarchived
        await self._archive_tolerant(submission_id, actor_id, reason)

        form_data = prev.get("form_data")
        if form_data:
            metadata = dict(form_data.get("metadata") or {})
            new_version = (metadata.get("version") or 1) + 1
            metadata.update({
                "updated_at": timestamp,
                "admin_approved": status == SubmissionStatus.APPROVED.value,
                "version": new_version,
                "last_update_by": actor_id,
                "update_reason": status,
                "feedback": feedback_notes or metadata.get("feedback"),
                "change_history": list(metadata.get("change_history") or []) + [
                    {
                        "version": new_version,
                        "timestamp": timestamp,
                        "actor": actor_id,
                        "status": status,
                        "reason": reason
                    }
                ]
            })
            form_data = {**form_data, "metadata": metadata}

        updates = {
            "status": status,
            "form_data": form_data,
            "admin_notes": admin_notes if admin_notes is not None else prev.get("admin_notes"),
            "feedback_notes": feedback_notes if feedback_notes is not None else prev.get("feedback_notes"),
            "admin_approved": status == SubmissionStatus.APPROVED.value,
            "updated_at": timestamp,
            "history": list(prev.get("history") or []) + [
                {
                    "action": status,
                    "actor_id": actor_id,
                    "timestamp": timestamp,
                    "details": {
                        "admin_notes": admin_notes,
                        "feedback_notes": feedback_notes,
                        "change_reason": reason
                    }
                }
            ]
        }

        await self.store.update_fields(SUBMISSIONS, submission_id, updates)

        await self.audit_service.log_action(
            action=AuditAction.SUBMISSION_UPDATED,
            actor_id=actor_id,
            entity_type="submission",
            entity_id=submission_id,
            details={"old_status": prev.get("status"), "new_status": status, "reason": reason}
        )

        prev.update(updates)
        return Submission.model_validate(prev)

    async def approve_submission(
        self,
        submission_id: str,
        actor_id: str,
        assignment_id: Optional[str] = None,
        feedback_notes: Optional[str] = None,
        quality_score: Optional[float] = None,
        review_notes: Optional[str] = None
    ) -> str:
        """
        Approve a submission for the training dataset.

        Copies an enhanced snapshot into finalSubmissions, marks the
        assignment approved, then runs the generic status update on the
        original submission. Returns the final submission id.
        """
        data = await self.store.get_by_id(SUBMISSIONS, submission_id)
        if not data:
            raise NotFoundError("Submission", submission_id)

        assignment_id = assignment_id or data.get("assignment_id")
        # Nothing is written until both records are known to exist
        await self.assignment_service.get_assignment(assignment_id)
        timestamp = datetime.utcnow()

        await self._archive_tolerant(submission_id, actor_id, APPROVAL_REASON)

        form_data = copy.deepcopy(data.get("form_data") or {})
        metadata = form_data.get("metadata") or {}
        new_version = (metadata.get("version") or 1) + 1
        metadata.update({
            "admin_approved": True,
            "updated_at": timestamp,
            "approved_at": timestamp,
            "approved_by": actor_id,
            "version": new_version,
            "review_notes": review_notes,
            "quality_score": quality_score,
            "training_data_status": "approved",
            "data_quality": {
                "completeness": quality_score >= 8 if quality_score is not None else None,
                "verified": True,
                "verification_date": timestamp
            },
            "change_history": list(metadata.get("change_history") or []) + [
                {
                    "version": new_version,
                    "timestamp": timestamp,
                    "actor": actor_id,
                    "status": SubmissionStatus.APPROVED.value,
                    "reason": APPROVAL_REASON
                }
            ]
        })
        form_data["metadata"] = metadata

        enhanced = {key: value for key, value in data.items() if key != "id"}
        enhanced.update({
            "submission_id": submission_id,
            "form_data": form_data,
            "approved_at": timestamp,
            "approved_by": actor_id,
            "admin_approved": True,
            "feedback_notes": feedback_notes or data.get("feedback_notes") or "",
            "quality_score": quality_score,
            "review_notes": review_notes
        })

        final_id = await self.store.insert(FINAL_SUBMISSIONS, enhanced)
        logger.info("[APPROVAL] Submission %s copied to final submissions as %s", submission_id, final_id)

        await self.assignment_service.update_assignment_status(
            assignment_id,
            AssignmentStatus.APPROVED,
            actor_id
        )

        # Re-archives the pre-approval state; the duplicate record is expected
        await self.update_submission(
            submission_id=submission_id,
            status=SubmissionStatus.APPROVED.value,
            actor_id=actor_id,
            admin_notes=data.get("admin_notes"),
            feedback_notes=feedback_notes or data.get("feedback_notes"),
            change_reason=APPROVAL_REASON
        )

        await self.audit_service.log_action(
            action=AuditAction.SUBMISSION_APPROVED,
            actor_id=actor_id,
            entity_type="submission",
            entity_id=submission_id,
            details={
                "assignment_id": assignment_id,
                "final_submission_id": final_id,
                "quality_score": quality_score
            }
        )

        return final_id
