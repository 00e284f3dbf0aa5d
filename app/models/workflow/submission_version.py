"""Models for the submission version history"""
from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class SubmissionVersionRecord(BaseModel):
    """Immutable snapshot of a submission taken before a status-changing update"""
    id: str
    submission_id: str
    version_number: int
    version_data: Optional[Dict[str, Any]] = None
    archived_at: datetime
    archived_by: str
    change_reason: str


class VersionInfo(BaseModel):
    version_number: int
    archived_at: datetime
    archived_by: str
    change_reason: str


class NotesChanges(BaseModel):
    intern_notes: bool
    admin_notes: bool
    feedback_notes: bool


class VersionComparison(BaseModel):
    """
    Shallow comparison of two archived versions.

    `changes` and `metadata_changes` map a top-level key to
    {added, removed, old_value, new_value} or {changed, old_value, new_value};
    they are None when nothing differs and {"full_change": True} when one side
    has no data at all.
    """
    version_info: Dict[str, VersionInfo]
    changes: Optional[Dict[str, Any]] = None
    metadata_changes: Optional[Dict[str, Any]] = None
    status_changes: bool
    notes_changes: NotesChanges
