from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.core.config import Settings
from app.core.errors import NotFoundError
from app.models.auth.user import UserRole
from app.models.workflow.assignment import (
    AssignmentCreate, AssignmentStatus, AssignmentStatusUpdate, BulkAssignmentCreate
)
from app.models.workflow.audit import AuditAction
from app.routes.auth.dependencies import get_store, get_catalog, get_settings, get_current_user, check_role
from app.services.exam.autofill import AutoFillService
from app.services.exam.catalog import ExamCatalog
from app.services.workflow.assignment import AssignmentService
from app.services.workflow.audit import AuditService
from app.services.workflow.submission import SubmissionService
from app.store.base import DocumentStore
from app.utils.response import success_response, error_response, forbidden_response

router = APIRouter(prefix="/assignments", tags=["Assignments"])

# Statuses an intern may set on their own assignment
INTERN_STATUSES = (AssignmentStatus.IN_PROGRESS, AssignmentStatus.COMPLETED)


@router.post("")
async def create_assignments(
    assignment_data: AssignmentCreate,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    Assign an exam to one or more interns (admin only).

    One assignment is created per intern id.
    """
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    assignment_service = AssignmentService(store)
    ids = await assignment_service.assign_work(assignment_data, assigned_by=current_user["id"])

    return success_response(
        message=f"{len(ids)} assignment(s) created",
        data={"assignment_ids": ids},
        status_code=201
    )


@router.post("/bulk")
async def create_sub_exam_assignments(
    bulk_data: BulkAssignmentCreate,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    catalog: ExamCatalog = Depends(get_catalog)
):
    """
    Assign selected sub-exams of a main exam to an intern (admin only).

    An empty sub_exam_ids list assigns every sub-exam of the main exam.
    """
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    assignment_service = AssignmentService(store)
    try:
        ids = await assignment_service.assign_sub_exams(bulk_data, current_user["id"], catalog)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    return success_response(
        message=f"{len(ids)} assignment(s) created",
        data={"assignment_ids": ids},
        status_code=201
    )


@router.get("")
async def list_assignments(
    intern_id: str = Query("", description="Empty lists every assignment"),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    List assignments.

    - Admins can list any intern's assignments, or all of them
    - Interns only ever see their own
    """
    denied = check_role(current_user, UserRole.ADMIN, UserRole.INTERN)
    if denied:
        return denied

    if current_user["role"] == UserRole.INTERN:
        intern_id = current_user["id"]

    assignment_service = AssignmentService(store)
    assignments = await assignment_service.get_assignments_for_intern(intern_id)

    return success_response(
        message="Assignments retrieved successfully",
        data={"assignments": assignments, "total": len(assignments)}
    )


@router.get("/{assignment_id}")
async def get_assignment(
    assignment_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Get a single assignment"""
    denied = check_role(current_user, UserRole.ADMIN, UserRole.INTERN)
    if denied:
        return denied

    assignment_service = AssignmentService(store)
    try:
        assignment = await assignment_service.get_assignment(assignment_id)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    if current_user["role"] == UserRole.INTERN and assignment.intern_id != current_user["id"]:
        return forbidden_response("Can only view your own assignments")

    return success_response(message="Assignment retrieved successfully", data={"assignment": assignment})


@router.get("/{assignment_id}/autofill")
async def get_assignment_autofill(
    assignment_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    catalog: ExamCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings)
):
    """Initial exam form values for an assignment (null when nothing matches the catalog)"""
    denied = check_role(current_user, UserRole.ADMIN, UserRole.INTERN)
    if denied:
        return denied

    assignment_service = AssignmentService(store)
    try:
        assignment = await assignment_service.get_assignment(assignment_id)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    autofill_service = AutoFillService(store, catalog, settings.assignment_id_prefix)
    form_values = await autofill_service.get_autofilled_form_values(assignment)

    return success_response(
        message="Auto-fill data generated" if form_values else "No auto-fill data available",
        data={"assignment_id": assignment_id, "form_values": form_values}
    )


@router.patch("/{assignment_id}/status")
async def update_assignment_status(
    assignment_id: str,
    status_data: AssignmentStatusUpdate,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    Change an assignment status; the change is appended to its history.

    Interns may only mark their own assignments in-progress or completed.
    """
    denied = check_role(current_user, UserRole.ADMIN, UserRole.INTERN)
    if denied:
        return denied

    assignment_service = AssignmentService(store)
    try:
        if current_user["role"] == UserRole.INTERN:
            existing = await assignment_service.get_assignment(assignment_id)
            if existing.intern_id != current_user["id"]:
                return forbidden_response("Can only update your own assignments")
            if status_data.status not in INTERN_STATUSES:
                return forbidden_response(f"Interns cannot set status '{status_data.status.value}'")

        assignment = await assignment_service.update_assignment_status(
            assignment_id,
            status_data.status,
            current_user["id"],
            status_data.details
        )
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    await AuditService(store).log_action(
        action=AuditAction.ASSIGNMENT_STATUS_UPDATED,
        actor_id=current_user["id"],
        entity_type="assignment",
        entity_id=assignment_id,
        details={"status": assignment.status}
    )

    return success_response(message="Assignment status updated", data={"assignment": assignment})


@router.delete("/{assignment_id}")
async def delete_assignment(
    assignment_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Hard-delete an assignment (admin only). The deletion is audited first."""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    assignment_service = AssignmentService(store)
    try:
        await assignment_service.get_assignment(assignment_id)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    await AuditService(store).log_action(
        action=AuditAction.ASSIGNMENT_DELETED,
        actor_id=current_user["id"],
        entity_type="assignment",
        entity_id=assignment_id,
        details=f"Assignment {assignment_id} was deleted by {current_user['id']}"
    )

    try:
        await assignment_service.delete_assignment(assignment_id)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    return success_response(message="Assignment deleted successfully")


@router.get("/{assignment_id}/submissions")
async def get_assignment_submissions(
    assignment_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """All submissions made for an assignment (interns: own assignments only)"""
    denied = check_role(current_user, UserRole.ADMIN, UserRole.INTERN)
    if denied:
        return denied

    if current_user["role"] == UserRole.INTERN:
        try:
            assignment = await AssignmentService(store).get_assignment(assignment_id)
        except NotFoundError as e:
            return error_response(message=str(e), status_code=404)
        if assignment.intern_id != current_user["id"]:
            return forbidden_response("Can only view submissions for your own assignments")

    submission_service = SubmissionService(store)
    submissions = await submission_service.get_submissions_for_assignment(assignment_id)

    return success_response(
        message="Submissions retrieved successfully",
        data={"submissions": submissions, "total": len(submissions)}
    )
