"""
Interaction repository.
"""
import uuid
from typing import Optional, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.models.interaction import Interaction
from estate_crm.models.prospect import Prospect
from estate_crm.repositories.base import BaseRepository


class InteractionRepository(BaseRepository[Interaction]):
    """Repository for Interaction operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Interaction, session)

    async def list_recent(
        self,
        prospect_id: Optional[uuid.UUID] = None,
        agent_id: Optional[uuid.UUID] = None,
        limit: int = 100
    ) -> List[Interaction]:
        """Interactions newest first, optionally for one prospect or one agent's prospects."""
        query = select(Interaction)
        if prospect_id:
            query = query.where(Interaction.prospect_id == prospect_id)
        if agent_id:
            query = query.join(Prospect, Prospect.id == Interaction.prospect_id).where(
                Prospect.agent_id == agent_id
            )
        query = query.order_by(Interaction.occurred_at.desc()).limit(limit)
        result = await self.session.exec(query)
        return list(result.all())

    async def delete_for_prospect(self, prospect_id: uuid.UUID) -> int:
        """Delete a prospect's history (flushed, not committed). Returns the count."""
        result = await self.session.exec(
            select(Interaction).where(Interaction.prospect_id == prospect_id)
        )
        interactions = result.all()
        for interaction in interactions:
            await self.session.delete(interaction)
        await self.session.flush()
        return len(interactions)
