from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum

from app.models.workflow.history import HistoryEntry


class SubmissionStatus(str, Enum):
    """
    Known submission statuses.

    The generic updater accepts any string; these are the values the
    workflow itself writes.
    """
    SUBMITTED = "submitted"  # Waiting for admin review
    IN_REVIEW = "in-review"
    APPROVED = "approved"  # Copied into finalSubmissions
    REJECTED = "rejected"


class ScreenSize(BaseModel):
    width: Optional[int] = None
    height: Optional[int] = None
    viewport_width: Optional[int] = None
    viewport_height: Optional[int] = None


class DeviceInfo(BaseModel):
    """Client environment reported with a submission"""
    browser: Optional[str] = None
    os: Optional[str] = None
    device: Optional[str] = None
    screen_size: Optional[ScreenSize] = None


class SubmissionCreate(BaseModel):
    """Schema for an intern submitting an exam form"""
    assignment_id: str = Field(..., min_length=1)
    form_data: Dict[str, Any]
    intern_notes: Optional[str] = ""
    device_info: Optional[DeviceInfo] = None


class SubmissionStatusUpdate(BaseModel):
    """Schema for the generic status update"""
    status: str = Field(..., min_length=1)
    admin_notes: Optional[str] = None
    feedback_notes: Optional[str] = None
    change_reason: Optional[str] = None


class SubmissionApproval(BaseModel):
    """Schema for approving a submission into the training dataset"""
    assignment_id: Optional[str] = Field(None, description="Defaults to the submission's assignment")
    feedback_notes: Optional[str] = None
    quality_score: Optional[float] = Field(None, ge=0, le=10, description="Score out of 10")
    review_notes: Optional[str] = None


class Submission(BaseModel):
    """Submission record as stored"""
    id: str
    assignment_id: str
    form_data: Dict[str, Any]
    status: str
    intern_notes: Optional[str] = ""
    admin_notes: Optional[str] = ""
    feedback_notes: Optional[str] = ""
    admin_approved: bool = False
    created_at: datetime
    updated_at: datetime
    history: List[HistoryEntry] = Field(default_factory=list)

    @property
    def version(self) -> int:
        return (self.form_data.get("metadata") or {}).get("version") or 1
