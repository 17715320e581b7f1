"""
Automation rule repository.
"""
from typing import Optional, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.models.automation import AutomationRule
from estate_crm.repositories.base import BaseRepository


class RuleRepository(BaseRepository[AutomationRule]):
    """Repository for AutomationRule operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(AutomationRule, session)

    async def list_all(self, active_only: bool = False) -> List[AutomationRule]:
        """Rules ordered by name."""
        query = select(AutomationRule)
        if active_only:
            query = query.where(AutomationRule.is_active == True)
        query = query.order_by(AutomationRule.name)
        result = await self.session.exec(query)
        return list(result.all())

    async def get_by_name(self, name: str) -> Optional[AutomationRule]:
        query = select(AutomationRule).where(AutomationRule.name == name)
        result = await self.session.exec(query)
        return result.first()
