"""Read access to submissions shaped for dataset use"""
from typing import Optional, List, Dict, Any

from app.store.base import DocumentStore, SUBMISSIONS, FINAL_SUBMISSIONS
from app.utils.form_data import split_metadata


def training_metadata(submission: Dict[str, Any]) -> Dict[str, Any]:
    """Training-relevant subset of a submission's bookkeeping"""
    _, metadata = split_metadata(submission.get("form_data"))
    return {
        "created_at": submission.get("created_at"),
        "updated_at": submission.get("updated_at"),
        "approved_at": submission.get("approved_at"),
        "approved_by": submission.get("approved_by"),
        "quality_score": submission.get("quality_score"),
        "admin_notes": submission.get("admin_notes"),
        "feedback_notes": submission.get("feedback_notes"),
        "review_notes": submission.get("review_notes"),
        "version": metadata.get("version") or 1,
        "data_quality": metadata.get("data_quality") or {}
    }


class TrainingDataService:
    """Service for fetching submissions as training data"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_training_data_submissions(
        self,
        only_approved: bool = False,
        include_metadata: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Approved records come from finalSubmissions, everything else from
        submissions. With include_metadata each record also carries
        training_metadata and clean_data (form data without metadata).
        """
        collection = FINAL_SUBMISSIONS if only_approved else SUBMISSIONS
        submissions = await self.store.query_all(collection)

        if include_metadata:
            for submission in submissions:
                submission["training_metadata"] = training_metadata(submission)
                submission["clean_data"], _ = split_metadata(submission.get("form_data"))

        if limit and limit > 0:
            return submissions[:limit]
        return submissions

    async def get_training_submission_by_id(self, submission_id: str) -> Optional[Dict[str, Any]]:
        """Look in finalSubmissions first, then submissions"""
        data = await self.store.get_by_id(FINAL_SUBMISSIONS, submission_id)
        if data is None:
            data = await self.store.get_by_id(SUBMISSIONS, submission_id)
        if data is None:
            return None

        data["training_metadata"] = training_metadata(data)
        return data
