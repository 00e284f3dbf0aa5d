from pydantic import BaseModel, Field
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum

from app.models.workflow.history import HistoryEntry


class AssignmentStatus(str, Enum):
    """Assignment status"""
    ASSIGNED = "assigned"  # Created by an admin
    PENDING = "pending"
    IN_PROGRESS = "in-progress"  # Intern started filling the form
    COMPLETED = "completed"  # Intern submitted
    APPROVED = "approved"  # Admin approved the submission
    OVERDUE = "overdue"


class AssignmentNotes(BaseModel):
    """Structured notes describing what was assigned"""
    main_exam_name: Optional[str] = None
    sub_exam_name: Optional[str] = None
    sub_exam_code: Optional[str] = None


class AssignmentCreate(BaseModel):
    """Schema for assigning an exam to one or more interns"""
    main_exam_id: str = Field(..., min_length=1)
    sub_exam_id: Optional[str] = None
    intern_ids: List[str] = Field(..., min_length=1)
    due_date: datetime
    notes: Union[AssignmentNotes, str] = ""
    bulk: bool = False


class BulkAssignmentCreate(BaseModel):
    """Schema for assigning several sub-exams of one main exam to an intern"""
    main_exam_id: int
    sub_exam_ids: List[int] = Field(default_factory=list, description="Empty means every sub-exam")
    intern_id: str = Field(..., min_length=1)
    due_date: datetime


class AssignmentStatusUpdate(BaseModel):
    """Schema for changing an assignment status"""
    status: AssignmentStatus
    details: dict = Field(default_factory=dict)


class Assignment(BaseModel):
    """Assignment record as stored"""
    id: str
    main_exam_id: str
    sub_exam_id: Optional[str] = None
    intern_id: str
    assigned_by: str
    due_date: datetime
    status: str = AssignmentStatus.ASSIGNED.value
    notes: Union[AssignmentNotes, str] = ""
    history: List[HistoryEntry] = Field(default_factory=list)


class AssignmentListItem(Assignment):
    """Assignment with display names resolved from its notes"""
    main_exam_name: str = "N/A"
    sub_exam_name: str = "N/A"
    sub_exam_code: str = "N/A"
