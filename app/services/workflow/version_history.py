"""
Submission version history.

Every status-changing update archives the current submission first. Archive
records are write-once; nothing here updates or deletes them.
"""
import json
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.core.errors import NotFoundError
from app.models.workflow.submission_version import (
    SubmissionVersionRecord,
    VersionComparison,
    VersionInfo,
    NotesChanges
)
from app.store.base import DocumentStore, SUBMISSIONS, SUBMISSION_HISTORY, DESCENDING

logger = logging.getLogger(__name__)


def _serialized(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def find_changes(old: Optional[Dict[str, Any]], new: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Shallow key-level diff.

    Nested objects and arrays are compared as whole values by their JSON
    form. Returns None when nothing differs and {"full_change": True} when
    either side is missing.
    """
    if old is None or new is None:
        return {"full_change": True}

    changes: Dict[str, Any] = {}
    for key in list(old) + [k for k in new if k not in old]:
        if key not in old or key not in new:
            changes[key] = {
                "added": key not in old,
                "removed": key not in new,
                "old_value": old.get(key),
                "new_value": new.get(key)
            }
        elif _serialized(old[key]) != _serialized(new[key]):
            changes[key] = {
                "changed": True,
                "old_value": old[key],
                "new_value": new[key]
            }

    return changes or None


class VersionHistoryService:
    """Archive, list and compare submission versions"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def archive_submission_version(self, submission_id: str, actor_id: str, change_reason: str) -> str:
        """Snapshot the current submission. Raises NotFoundError for an unknown id."""
        submission = await self.store.get_by_id(SUBMISSIONS, submission_id)
        if not submission:
            raise NotFoundError("Submission", submission_id)

        metadata = (submission.get("form_data") or {}).get("metadata") or {}
        record = {
            "submission_id": submission_id,
            "version_number": metadata.get("version") or 1,
            "version_data": submission,
            "archived_at": datetime.utcnow(),
            "archived_by": actor_id,
            "change_reason": change_reason
        }

        record_id = await self.store.insert(SUBMISSION_HISTORY, record)
        logger.info(
            "[HISTORY] Archived submission %s version %s (%s)",
            submission_id, record["version_number"], change_reason
        )
        return record_id

    async def get_submission_version_history(
        self,
        submission_id: str,
        include_data: bool = False
    ) -> List[SubmissionVersionRecord]:
        """Archived versions of a submission, newest first"""
        docs = await self.store.query_ordered_by(
            SUBMISSION_HISTORY,
            "archived_at",
            DESCENDING,
            where={"submission_id": submission_id}
        )

        records = []
        for doc in docs:
            if not include_data:
                doc.pop("version_data", None)
            records.append(SubmissionVersionRecord.model_validate(doc))
        return records

    async def get_version(self, version_id: str) -> SubmissionVersionRecord:
        doc = await self.store.get_by_id(SUBMISSION_HISTORY, version_id)
        if not doc:
            raise NotFoundError("Version record", version_id)
        return SubmissionVersionRecord.model_validate(doc)

    async def compare_submission_versions(self, version_id_1: str, version_id_2: str) -> VersionComparison:
        """Compare two archived versions of a submission"""
        doc_1 = await self.store.get_by_id(SUBMISSION_HISTORY, version_id_1)
        doc_2 = await self.store.get_by_id(SUBMISSION_HISTORY, version_id_2)

        if not doc_1 or not doc_2:
            raise NotFoundError(
                "Version record",
                message="One or both version records not found"
            )

        v1 = SubmissionVersionRecord.model_validate(doc_1)
        v2 = SubmissionVersionRecord.model_validate(doc_2)
        data_1 = v1.version_data or {}
        data_2 = v2.version_data or {}
        form_1 = data_1.get("form_data")
        form_2 = data_2.get("form_data")

        return VersionComparison(
            version_info={
                "v1": VersionInfo(**v1.model_dump(exclude={"id", "submission_id", "version_data"})),
                "v2": VersionInfo(**v2.model_dump(exclude={"id", "submission_id", "version_data"}))
            },
            changes=find_changes(form_1, form_2),
            metadata_changes=find_changes(
                (form_1 or {}).get("metadata"),
                (form_2 or {}).get("metadata")
            ),
            status_changes=data_1.get("status") != data_2.get("status"),
            notes_changes=NotesChanges(
                intern_notes=data_1.get("intern_notes") != data_2.get("intern_notes"),
                admin_notes=data_1.get("admin_notes") != data_2.get("admin_notes"),
                feedback_notes=data_1.get("feedback_notes") != data_2.get("feedback_notes")
            )
        )
