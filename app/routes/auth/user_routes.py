from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.core.errors import NotFoundError
from app.models.auth.user import UserCreate, UserRole, UserRoleUpdate
from app.routes.auth.dependencies import get_store, get_current_user, check_role
from app.services.auth.user_directory import UserDirectoryService
from app.store.base import DocumentStore
from app.utils.response import success_response, error_response

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("")
async def add_user(
    user_data: UserCreate,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Add a user to the directory (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    user = await UserDirectoryService(store).add_user(user_data, current_user["id"])

    return success_response(message="User added successfully", data={"user": user}, status_code=201)


@router.get("")
async def list_users(
    role: Optional[UserRole] = Query(None),
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """List users, optionally by role (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    users = await UserDirectoryService(store).get_users(role)

    return success_response(message="Users retrieved successfully", data={"users": users, "total": len(users)})


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    try:
        user = await UserDirectoryService(store).get_user(user_id)
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    return success_response(message="User retrieved successfully", data={"user": user})


@router.patch("/{user_id}/role")
async def update_user_role(
    user_id: str,
    role_data: UserRoleUpdate,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Change a user's role (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    try:
        user = await UserDirectoryService(store).update_user_role(user_id, role_data.role, current_user["id"])
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    return success_response(message="User role updated successfully", data={"user": user})


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    current_user: Optional[dict] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Remove a user from the directory (admin only)"""
    denied = check_role(current_user, UserRole.ADMIN)
    if denied:
        return denied

    try:
        await UserDirectoryService(store).delete_user(user_id, current_user["id"])
    except NotFoundError as e:
        return error_response(message=str(e), status_code=404)

    return success_response(message="User removed successfully")
