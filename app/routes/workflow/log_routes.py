from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.models.auth.user import UserRole
from app.routes.auth.dependencies import get_store, get_current_user, check_role
from app.services.workflow.audit import AuditService
from app.store.base import DocumentStore
from app.utils.response import success_response

router = APIRouter(prefix="/logs", tags=["Audit Logs"])


@router.get("")
async def get_logs(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Audit log, newest first (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    logs = await AuditService(store).get_all_logs(limit)

    return success_response(message="Logs retrieved successfully", data={"logs": logs, "total": len(logs)})


@router.get("/{entity_type}/{entity_id}")
async def get_entity_logs(
    entity_type: str,
    entity_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Audit trail of a single entity, oldest first (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    logs = await AuditService(store).get_entity_history(entity_type, entity_id)

    return success_response(message="Logs retrieved successfully", data={"logs": logs, "total": len(logs)})
