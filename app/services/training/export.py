"""Export approved submissions for dataset consumers"""
import hashlib
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.core.errors import UnsupportedExportFormatError
from app.models.training.quality import TrainingDataExport
from app.services.training.training_data import TrainingDataService
from app.store.base import DocumentStore
from app.utils.form_data import split_metadata

SUPPORTED_FORMATS = ("json",)


def hash_id(value: str) -> str:
    """Stable anonymous replacement for a personal identifier"""
    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()[:12]
    return f"anon_{digest}"


def format_timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return datetime.utcnow().isoformat()


def _check_format(export_format: str) -> None:
    if export_format not in SUPPORTED_FORMATS:
        raise UnsupportedExportFormatError(export_format)


class ExportService:
    """Service for exporting training data"""

    def __init__(self, store: DocumentStore):
        self.training_data = TrainingDataService(store)

    async def export_training_data(self, export_format: str = "json") -> List[TrainingDataExport]:
        """Approved submissions as {form_data, metadata, quality, timestamp}"""
        _check_format(export_format)

        submissions = await self.training_data.get_training_data_submissions(
            only_approved=True,
            include_metadata=True
        )

        records = []
        for submission in submissions:
            _, metadata = split_metadata(submission.get("form_data"))
            records.append(TrainingDataExport(
                form_data=submission["clean_data"],
                metadata=submission["training_metadata"],
                quality=metadata.get("data_quality") or {},
                timestamp=format_timestamp(submission.get("approved_at"))
            ))
        return records

    async def export_form_data_for_training(
        self,
        export_format: str = "json",
        include_metadata: bool = True,
        only_approved: bool = True,
        limit: Optional[int] = None,
        anonymize: bool = False
    ) -> List[Dict[str, Any]]:
        """Richer export with quality metrics and optional anonymization"""
        _check_format(export_format)

        submissions = await self.training_data.get_training_data_submissions(
            only_approved=only_approved,
            include_metadata=include_metadata,
            limit=limit
        )

        return [
            {
                "id": submission["id"],
                "form_data": submission.get("clean_data") or submission.get("form_data"),
                "metadata": self._export_metadata(submission, anonymize),
                "quality_metrics": self._quality_metrics(submission),
                "timestamp": format_timestamp(submission.get("created_at"))
            }
            for submission in submissions
        ]

    @staticmethod
    def _export_metadata(submission: Dict[str, Any], anonymize: bool) -> Dict[str, Any]:
        _, metadata = split_metadata(submission.get("form_data"))
        metadata = submission.get("training_metadata") or metadata

        if not anonymize:
            return metadata

        _, form_metadata = split_metadata(submission.get("form_data"))
        intern_id = form_metadata.get("intern_id")
        approved_by = metadata.get("approved_by") or form_metadata.get("approved_by")
        return {
            "created_at": metadata.get("created_at") or submission.get("created_at"),
            "updated_at": metadata.get("updated_at") or submission.get("updated_at"),
            "version": metadata.get("version") or 1,
            "admin_approved": bool(form_metadata.get("admin_approved") or submission.get("admin_approved")),
            "data_quality": metadata.get("data_quality") or {},
            "intern_id": hash_id(intern_id) if intern_id else "anonymous",
            "approved_by": hash_id(approved_by) if approved_by else None
        }

    @staticmethod
    def _quality_metrics(submission: Dict[str, Any]) -> Dict[str, Any]:
        _, metadata = split_metadata(submission.get("form_data"))
        data_quality = metadata.get("data_quality") or {}
        quality_score = submission.get("quality_score")
        return {
            "quality_score": quality_score if quality_score is not None else metadata.get("quality_score"),
            "completeness": data_quality.get("completeness"),
            "verified": bool(data_quality.get("verified")),
            "approved": bool(submission.get("admin_approved") or metadata.get("admin_approved")),
            "version": metadata.get("version") or 1
        }
