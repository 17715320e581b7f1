"""
User service - account listing and role management.
"""
import logging
import uuid
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.core.exceptions import NotFoundError, ValidationError
from estate_crm.core.permissions import Action, Role, has_permission, parse_role
from estate_crm.models.user import User
from estate_crm.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Service for user operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def get(self, user_id: uuid.UUID) -> User:
        """Get a user by ID."""
        user = await self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def get_lead_recipient(self, agent_id: uuid.UUID) -> User:
        """Get an active user who may receive leads."""
        agent = await self.user_repo.get(agent_id)
        if not agent or not agent.is_active:
            raise NotFoundError("User", str(agent_id))
        if not has_permission(agent, Action.RECEIVE_LEADS):
            raise ValidationError(f"User '{agent_id}' cannot receive leads", field="agent_id")
        return agent

    async def list_by_role(self, role: str) -> List[User]:
        """List active users with a role."""
        parsed = parse_role(role)
        if parsed is None:
            raise ValidationError(f"Unknown role '{role}'", field="role")
        return await self.user_repo.list_by_role(parsed.value)

    async def change_role(self, actor: User, user_id: uuid.UUID, role: Role) -> User:
        """Change a user's role. Callers must already be gated to admins."""
        user = await self.user_repo.update_role(user_id, role.value)
        if not user:
            raise NotFoundError("User", str(user_id))
        logger.info(f"User {actor.id} changed role of {user_id} to {role.value}")
        return user
