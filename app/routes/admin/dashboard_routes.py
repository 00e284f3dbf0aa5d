import asyncio
from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.models.auth.user import UserRole
from app.routes.auth.dependencies import get_store, get_catalog, get_current_user, check_role
from app.services.auth.user_directory import UserDirectoryService
from app.services.exam.catalog import ExamCatalog
from app.services.workflow.assignment import AssignmentService
from app.services.workflow.audit import AuditService
from app.store.base import DocumentStore
from app.utils.response import success_response

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/dashboard")
async def get_dashboard(
    log_limit: int = Query(20, ge=1, le=200),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    catalog: ExamCatalog = Depends(get_catalog)
):
    """
    Everything the admin dashboard shows on load (admin only):
    - Exam catalog
    - Interns in the directory
    - Most recent audit log entries
    - All assignments with their exam names
    """
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    interns, logs, assignments = await asyncio.gather(
        UserDirectoryService(store).get_users(UserRole.INTERN),
        AuditService(store).get_all_logs(log_limit),
        AssignmentService(store).get_assignments_for_intern("")
    )

    return success_response(
        message="Dashboard data retrieved successfully",
        data={
            "exams": catalog.exams,
            "interns": interns,
            "logs": logs,
            "assignments": assignments
        }
    )
