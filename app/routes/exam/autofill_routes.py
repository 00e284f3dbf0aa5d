from fastapi import APIRouter, Depends
from typing import Optional

from app.core.config import Settings
from app.routes.auth.dependencies import get_store, get_catalog, get_settings, get_current_user, check_role
from app.models.auth.user import UserRole
from app.services.exam.autofill import AutoFillService
from app.services.exam.catalog import ExamCatalog
from app.store.base import DocumentStore
from app.utils.response import success_response

router = APIRouter(prefix="/autofill", tags=["Auto-fill"])


@router.get("/{identifier}")
async def get_autofill(
    identifier: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    catalog: ExamCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings)
):
    """
    Initial form values for an exam identifier.

    - "1" fills the main exam only
    - "1-5" fills the main exam and sub-exam 5
    - "assignment-<id>" fills from the referenced assignment
    - form_values is null when nothing could be filled; the form stays manual
    """
    denied = check_role(current_user, UserRole.INTERN, UserRole.ADMIN)
    if denied:
        return denied

    autofill_service = AutoFillService(store, catalog, settings.assignment_id_prefix)
    result = await autofill_service.resolve(identifier)

    message = "Auto-fill data generated" if result.form_values else "No auto-fill data available"
    return success_response(message=message, data=result)
