"""
Prospect repository with listing and score persistence.
"""
import uuid
from typing import Optional, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func

from estate_crm.core.clock import utcnow
from estate_crm.core.pagination import create_paginated_response
from estate_crm.models.prospect import Prospect
from estate_crm.repositories.base import BaseRepository


class ProspectRepository(BaseRepository[Prospect]):
    """Repository for Prospect operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Prospect, session)

    async def search(
        self,
        agent_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        min_score: Optional[int] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """List prospects, highest score first."""
        query = select(Prospect)

        if agent_id:
            query = query.where(Prospect.agent_id == agent_id)
        if status:
            query = query.where(Prospect.status == status)
        if min_score is not None:
            query = query.where(Prospect.score >= min_score)

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total_result = await self.session.exec(count_query)
        total = total_result.one()

        # Apply ordering and pagination
        query = query.order_by(Prospect.score.desc(), Prospect.created_at.desc())
        offset = (page - 1) * limit
        query = query.offset(offset).limit(limit)

        result = await self.session.exec(query)
        items = result.all()

        return create_paginated_response(items, total, page, limit)

    async def list_all(self) -> List[Prospect]:
        """Every prospect, for batch jobs."""
        result = await self.session.exec(select(Prospect))
        return list(result.all())

    async def save(self, prospect: Prospect) -> Prospect:
        """Persist an already-modified prospect."""
        prospect.updated_at = utcnow()
        self.session.add(prospect)
        await self.session.commit()
        await self.session.refresh(prospect)
        return prospect

    async def update_score(self, prospect_id: uuid.UUID, score: int) -> bool:
        """
        Write a new score for one prospect.

        Returns False when the prospect no longer exists. Database errors roll
        the session back and propagate so the caller can record the failure
        and carry on with the next prospect.
        """
        prospect = await self.get(prospect_id)
        if not prospect:
            return False

        prospect.score = score
        self.session.add(prospect)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return True
