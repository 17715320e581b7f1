"""
User repository.
"""
import uuid
from typing import Optional, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.models.user import User
from estate_crm.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        query = select(User).where(User.username == username)
        result = await self.session.exec(query)
        return result.first()

    async def list_by_role(self, role: str, active_only: bool = True) -> List[User]:
        """Get all users holding a role."""
        query = select(User).where(User.role == role)
        if active_only:
            query = query.where(User.is_active == True)
        query = query.order_by(User.name)
        result = await self.session.exec(query)
        return list(result.all())

    async def update_role(self, user_id: uuid.UUID, role: str) -> Optional[User]:
        """Change a user's role."""
        user = await self.get(user_id)
        if user:
            user.role = role
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        return user
