"""
Data quality statistics over stored submissions.

Completeness and field statistics walk the form data as a tree of leaves,
ignoring the metadata subtree. A leaf counts as filled unless it is None or
an empty string.
"""
import json
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime

from app.models.training.quality import (
    DataQualityStats,
    FieldStats,
    VersionStats,
    SubmissionTrends
)
from app.services.training.training_data import TrainingDataService
from app.store.base import DocumentStore
from app.utils.field_path import FieldPath, format_field_path, iter_leaves, is_filled
from app.utils.form_data import split_metadata


def count_fields(form_data: Dict[str, Any]) -> Tuple[int, int]:
    """(total leaves, filled leaves)"""
    total = filled = 0
    for _, value in iter_leaves(form_data):
        total += 1
        if is_filled(value):
            filled += 1
    return total, filled


def calculate_completeness(submission: Dict[str, Any]) -> Optional[float]:
    """Filled-leaf ratio of a submission's form data; None without form data"""
    form_data = submission.get("form_data")
    if not form_data:
        return None

    clean, _ = split_metadata(form_data)
    total, filled = count_fields(clean)
    return filled / total if total > 0 else 0.0


def is_approved(submission: Dict[str, Any]) -> bool:
    _, metadata = split_metadata(submission.get("form_data"))
    return bool(
        metadata.get("approved_at")
        or metadata.get("approved_by")
        or metadata.get("admin_approved")
        or submission.get("approved_at")
        or submission.get("approved_by")
    )


def _value_key(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def calculate_field_stats(submissions: List[Dict[str, Any]]) -> Dict[str, FieldStats]:
    """Fill rate, null rate and distinct-value count per field path"""
    counts: Dict[FieldPath, Dict[str, Any]] = {}

    for submission in submissions:
        form_data = submission.get("form_data")
        if not form_data:
            continue
        clean, _ = split_metadata(form_data)

        for path, value in iter_leaves(clean):
            entry = counts.setdefault(path, {"total": 0, "null_count": 0, "values": set()})
            entry["total"] += 1
            if is_filled(value):
                entry["values"].add(_value_key(value))
            else:
                entry["null_count"] += 1

    stats = {}
    for path, entry in counts.items():
        total = entry["total"]
        stats[format_field_path(path)] = FieldStats(
            fill_rate=(total - entry["null_count"]) / total if total else 0.0,
            null_rate=entry["null_count"] / total if total else 0.0,
            unique_values=len(entry["values"])
        )
    return stats


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def week_of_month_key(date: datetime) -> str:
    """Simplified week key: YYYY-MM-W<day // 7>"""
    return f"{date.year}-{date.month:02d}-W{date.day // 7}"


def calculate_submission_trends(submissions: List[Dict[str, Any]]) -> SubmissionTrends:
    trends = SubmissionTrends()
    for submission in submissions:
        _, metadata = split_metadata(submission.get("form_data"))
        date = _as_datetime(submission.get("created_at") or metadata.get("created_at"))
        if date is None:
            continue

        day_key = date.date().isoformat()
        week_key = week_of_month_key(date)
        trends.by_day[day_key] = trends.by_day.get(day_key, 0) + 1
        trends.by_week[week_key] = trends.by_week.get(week_key, 0) + 1
    return trends


class QualityService:
    """Dataset quality statistics"""

    def __init__(self, store: DocumentStore):
        self.training_data = TrainingDataService(store)

    async def generate_data_quality_stats(self) -> DataQualityStats:
        submissions = await self.training_data.get_training_data_submissions(only_approved=False)
        approved = [s for s in submissions if is_approved(s)]

        scores = []
        for submission in submissions:
            _, metadata = split_metadata(submission.get("form_data"))
            score = submission.get("quality_score")
            if score is None:
                score = metadata.get("quality_score")
            if score is not None:
                scores.append(score)

        completeness = [c for c in (calculate_completeness(s) for s in submissions) if c is not None]
        versions = [split_metadata(s.get("form_data"))[1].get("version") or 1 for s in submissions]

        return DataQualityStats(
            total_submissions=len(submissions),
            approved_submissions=len(approved),
            pending_submissions=len(submissions) - len(approved),
            average_quality_score=sum(scores) / len(scores) if scores else None,
            completeness_rate=sum(completeness) / len(completeness) if completeness else 0.0,
            version_stats=VersionStats(
                average_versions=sum(versions) / len(versions) if versions else 0.0,
                max_versions=max(versions) if versions else 0
            ),
            field_stats=calculate_field_stats(submissions),
            submission_trends=calculate_submission_trends(submissions)
        )
