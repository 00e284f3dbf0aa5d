from typing import Optional
from fastapi import Header, Request
from fastapi.responses import JSONResponse

from app.core.config import Settings
from app.database import get_store  # noqa: F401
from app.models.auth.user import UserRole
from app.services.exam.catalog import ExamCatalog
from app.utils.response import forbidden_response, unauthorized_response


async def get_catalog(request: Request) -> ExamCatalog:
    """Exam catalog loaded at startup"""
    return request.app.state.catalog


async def get_current_user(
    x_actor_id: Optional[str] = Header(None),
    x_actor_role: Optional[str] = Header(None)
) -> Optional[dict]:
    """
    Caller identity as forwarded by the front end session.
    Returns None when either header is missing or the role is unknown.
    """
    if not x_actor_id or not x_actor_role:
        return None

    try:
        role = UserRole(x_actor_role.lower())
    except ValueError:
        return None

    return {"id": x_actor_id, "role": role}


def check_role(current_user: Optional[dict], *roles: UserRole) -> Optional[JSONResponse]:
    """Error response when the caller may not use the route, else None"""
    if not current_user:
        return unauthorized_response("Authentication required")

    if current_user["role"] not in roles:
        return forbidden_response(
            f"This action requires role: {', '.join(role.value for role in roles)}"
        )

    return None


async def get_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings
