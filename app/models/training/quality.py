from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class FieldStats(BaseModel):
    fill_rate: float
    null_rate: float
    unique_values: int


class VersionStats(BaseModel):
    average_versions: float
    max_versions: int


class SubmissionTrends(BaseModel):
    by_day: Dict[str, int] = Field(default_factory=dict)
    by_week: Dict[str, int] = Field(default_factory=dict)


class DataQualityStats(BaseModel):
    """Dataset-wide quality statistics"""
    total_submissions: int
    approved_submissions: int
    pending_submissions: int
    average_quality_score: Optional[float] = None
    completeness_rate: float
    version_stats: VersionStats
    field_stats: Dict[str, FieldStats] = Field(default_factory=dict)
    submission_trends: SubmissionTrends


class TrainingDataExport(BaseModel):
    """One approved submission shaped for dataset consumers"""
    form_data: Dict[str, Any]
    metadata: Dict[str, Any]
    quality: Dict[str, Any]
    timestamp: str
