from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.core.errors import UnsupportedExportFormatError
from app.models.auth.user import UserRole
from app.routes.auth.dependencies import get_store, get_current_user, check_role
from app.services.training.export import ExportService
from app.services.training.quality import QualityService
from app.services.training.training_data import TrainingDataService
from app.store.base import DocumentStore
from app.utils.response import success_response, error_response

router = APIRouter(prefix="/training-data", tags=["Training Data"])


@router.get("")
async def list_training_data(
    only_approved: bool = Query(False),
    include_metadata: bool = Query(False),
    limit: Optional[int] = Query(None, ge=1),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Submissions as training data (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    submissions = await TrainingDataService(store).get_training_data_submissions(
        only_approved=only_approved,
        include_metadata=include_metadata,
        limit=limit
    )

    return success_response(
        message="Training data retrieved successfully",
        data={"submissions": submissions, "total": len(submissions)}
    )


@router.get("/stats")
async def get_quality_stats(
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    Dataset quality report (admin only).

    Completeness, per-field fill rates, version counts and daily/weekly
    submission trends over every live submission.
    """
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    stats = await QualityService(store).generate_data_quality_stats()

    return success_response(message="Data quality stats generated", data={"stats": stats})


@router.get("/export")
async def export_training_data(
    format: str = Query("json", description="Only json is supported"),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Approved submissions as {form_data, metadata, quality, timestamp} records (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    try:
        records = await ExportService(store).export_training_data(format)
    except UnsupportedExportFormatError as e:
        return error_response(message=str(e), status_code=400)

    return success_response(
        message="Training data exported successfully",
        data={"records": records, "total": len(records)}
    )


@router.get("/export/training")
async def export_form_data_for_training(
    format: str = Query("json"),
    include_metadata: bool = Query(True),
    only_approved: bool = Query(True),
    limit: Optional[int] = Query(None, ge=1),
    anonymize: bool = Query(False, description="Replace actor ids with stable hashes"),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Export with quality metrics and optional anonymization (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    try:
        records = await ExportService(store).export_form_data_for_training(
            export_format=format,
            include_metadata=include_metadata,
            only_approved=only_approved,
            limit=limit,
            anonymize=anonymize
        )
    except UnsupportedExportFormatError as e:
        return error_response(message=str(e), status_code=400)

    return success_response(
        message="Training data exported successfully",
        data={"records": records, "total": len(records)}
    )


@router.get("/{submission_id}")
async def get_training_submission(
    submission_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Single training record; final submissions take precedence (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    submission = await TrainingDataService(store).get_training_submission_by_id(submission_id)
    if submission is None:
        return error_response(message="Submission not found", status_code=404)

    return success_response(message="Training record retrieved successfully", data={"submission": submission})
