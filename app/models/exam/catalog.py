from pydantic import BaseModel, Field
from typing import List


class SubExam(BaseModel):
    """Specific exam variant nested under a main exam"""
    id: int
    name: str
    code: str

    class Config:
        frozen = True


class ExamCatalogEntry(BaseModel):
    """Main exam in the static reference catalog"""
    id: int
    name: str
    code: str
    sub_exams: List[SubExam] = Field(default_factory=list)

    class Config:
        frozen = True


class ExamOption(BaseModel):
    """Main exam entry for selection lists"""
    id: int
    name: str
    code: str


class ExamOptions(BaseModel):
    """Everything a form needs to populate its dropdowns"""
    main_exams: List[ExamOption]
    exam_sectors: List[str]
    conducting_bodies: List[str]
