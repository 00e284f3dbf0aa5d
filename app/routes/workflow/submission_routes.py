from fastapi import APIRouter, Depends, Query, Request
from typing import Optional

from app.core.errors import NotFoundError
from app.models.auth.user import UserRole
from app.models.workflow.submission import SubmissionApproval, SubmissionCreate, SubmissionStatusUpdate
from app.routes.auth.dependencies import get_store, get_current_user, check_role
from app.services.workflow.assignment import AssignmentService
from app.services.workflow.submission import SubmissionService
from app.services.workflow.version_history import VersionHistoryService
from app.store.base import DocumentStore
from app.utils.device_info import device_info_from_user_agent
from app.utils.response import success_response, error_response, forbidden_response

router = APIRouter(prefix="/submissions", tags=["Submissions"])


@router.post("")
async def submit_exam_form(
    submission_data: SubmissionCreate,
    request: Request,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    Submit a filled exam form for an assignment (intern only).

    Blank strings in the form are stored as null. When the client does not
    report its environment, it is derived from the User-Agent header.
    """
    denied = check_role(current_user, UserRole.INTERN)
    if denied:
        return denied

    assignment_service = AssignmentService(store)
    try:
        assignment = await assignment_service.get_assignment(submission_data.assignment_id)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    if assignment.intern_id != current_user["id"]:
        return forbidden_response("Can only submit forms for your own assignments")

    device_info = submission_data.device_info or device_info_from_user_agent(
        request.headers.get("user-agent")
    )

    submission_service = SubmissionService(store)
    submission_id = await submission_service.submit_exam_form(
        assignment_id=submission_data.assignment_id,
        form_data=submission_data.form_data,
        intern_id=current_user["id"],
        intern_notes=submission_data.intern_notes,
        device_info=device_info
    )

    return success_response(
        message="Exam form submitted successfully",
        data={"submission_id": submission_id},
        status_code=201
    )


@router.get("/history/compare")
async def compare_versions(
    version_id_1: str = Query(..., min_length=1),
    version_id_2: str = Query(..., min_length=1),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Compare two archived versions (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    version_history = VersionHistoryService(store)
    try:
        comparison = await version_history.compare_submission_versions(version_id_1, version_id_2)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    return success_response(message="Versions compared successfully", data={"comparison": comparison})


@router.get("/{submission_id}")
async def get_submission(
    submission_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Get a single submission (interns: submissions for their own assignments only)"""
    denied = check_role(current_user, UserRole.ADMIN, UserRole.INTERN)
    if denied:
        return denied

    submission_service = SubmissionService(store)
    try:
        submission = await submission_service.get_submission(submission_id)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    if current_user["role"] == UserRole.INTERN:
        try:
            assignment = await AssignmentService(store).get_assignment(submission.assignment_id)
        except NotFoundError:
            assignment = None
        if not assignment or assignment.intern_id != current_user["id"]:
            return forbidden_response("Can only view submissions for your own assignments")

    return success_response(
        message="Submission retrieved successfully",
        data={"submission": submission, "version": submission.version}
    )


@router.patch("/{submission_id}/status")
async def update_submission_status(
    submission_id: str,
    status_data: SubmissionStatusUpdate,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    Change a submission status (admin only).

    The current state is archived as a version record before the update.
    """
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    submission_service = SubmissionService(store)
    try:
        submission = await submission_service.update_submission(
            submission_id=submission_id,
            status=status_data.status,
            actor_id=current_user["id"],
            admin_notes=status_data.admin_notes,
            feedback_notes=status_data.feedback_notes,
            change_reason=status_data.change_reason
        )
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    return success_response(
        message="Submission updated successfully",
        data={"submission": submission, "version": submission.version}
    )


@router.post("/{submission_id}/approve")
async def approve_submission(
    submission_id: str,
    approval_data: SubmissionApproval,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Approve a submission into the training dataset (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    submission_service = SubmissionService(store)
    try:
        final_id = await submission_service.approve_submission(
            submission_id=submission_id,
            actor_id=current_user["id"],
            assignment_id=approval_data.assignment_id,
            feedback_notes=approval_data.feedback_notes,
            quality_score=approval_data.quality_score,
            review_notes=approval_data.review_notes
        )
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    return success_response(
        message="Submission approved and added to training data",
        data={"final_submission_id": final_id}
    )


@router.get("/{submission_id}/history")
async def get_submission_history(
    submission_id: str,
    include_data: bool = Query(False, description="Include the archived snapshots"),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Archived versions of a submission, newest first (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    version_history = VersionHistoryService(store)
    versions = await version_history.get_submission_version_history(submission_id, include_data)

    return success_response(
        message="Version history retrieved successfully",
        data={"versions": versions, "total": len(versions)}
    )
