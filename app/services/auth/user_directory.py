from typing import List, Optional

from app.core.errors import NotFoundError
from app.models.auth.user import User, UserCreate, UserRole
from app.models.workflow.audit import AuditAction
from app.services.workflow.audit import AuditService
from app.store.base import DocumentStore, USERS


class UserDirectoryService:
    """Admin-managed list of users and their roles"""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.audit_service = AuditService(store)

    async def add_user(self, user_data: UserCreate, actor_id: str) -> User:
        user = user_data.model_dump(mode="json")
        await self.store.set_by_id(USERS, user_data.id, user)

        await self.audit_service.log_action(
            action=AuditAction.USER_ADDED,
            actor_id=actor_id,
            entity_type="user",
            entity_id=user_data.id,
            details=f"Admin {actor_id} added user {user_data.email} (role: {user_data.role.value})"
        )
        return User.model_validate(user)

    async def get_user(self, user_id: str) -> User:
        doc = await self.store.get_by_id(USERS, user_id)
        if not doc:
            raise NotFoundError("User", user_id)
        return User.model_validate(doc)

    async def get_users(self, role: Optional[UserRole] = None) -> List[User]:
        if role:
            docs = await self.store.query_by_field(USERS, "role", role.value)
        else:
            docs = await self.store.query_all(USERS)
        return [User.model_validate(doc) for doc in docs]

    async def update_user_role(self, user_id: str, role: UserRole, actor_id: str) -> User:
        user = await self.get_user(user_id)
        await self.store.update_fields(USERS, user_id, {"role": role.value})

        await self.audit_service.log_action(
            action=AuditAction.USER_ROLE_UPDATED,
            actor_id=actor_id,
            entity_type="user",
            entity_id=user_id,
            details=f"Admin {actor_id} changed role of {user.email} from {user.role.value} to {role.value}"
        )
        return user.model_copy(update={"role": role})

    async def delete_user(self, user_id: str, actor_id: str) -> None:
        user = await self.get_user(user_id)
        await self.store.delete_by_id(USERS, user_id)

        await self.audit_service.log_action(
            action=AuditAction.USER_REMOVED,
            actor_id=actor_id,
            entity_type="user",
            entity_id=user_id,
            details=f"Admin {actor_id} removed user {user.email} (role: {user.role.value})"
        )
