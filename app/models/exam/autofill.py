from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from enum import Enum


class AssignmentType(str, Enum):
    """How an exam identifier maps onto catalog entries"""
    MAIN_ONLY = "main_only"  # "1" - main exam only, sub-exams picked manually
    SPECIFIC_SUBEXAM = "specific_subexam"  # "1-5" - main exam plus one sub-exam
    ASSIGNMENT_BASED = "assignment_based"  # "assignment-abc123" - look the assignment up


class ParsedExamAssignment(BaseModel):
    """Result of resolving an exam identifier"""
    assignment_type: AssignmentType
    main_exam_id: str = ""
    sub_exam_id: Optional[str] = None
    assignment_id: Optional[str] = None


class AutoFillStrategy(BaseModel):
    """Which form sections get pre-populated"""
    should_fill_main_exam: bool = False
    should_fill_sub_exams: bool = False
    specific_sub_exam_only: bool = False
    sub_exam_id: Optional[str] = None


class SubExamSeed(BaseModel):
    sub_exam_name: str
    short_code: str


class ExamAutoFillData(BaseModel):
    """Catalog values used to pre-populate an exam form"""
    main_exam_name: str
    exam_code: str
    conducting_body: str
    exam_sector: str
    sub_exams: List[SubExamSeed] = Field(default_factory=list)
    main_exam_id: int
    sub_exam_id: Optional[int] = None


class AutoFillResult(BaseModel):
    """Response for an auto-fill request; form_values is None when nothing could be filled"""
    identifier: str
    parsed: ParsedExamAssignment
    strategy: AutoFillStrategy
    form_values: Optional[Dict[str, Any]] = None
