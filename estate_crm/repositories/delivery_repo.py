"""
Delivery and payment repositories.
"""
import uuid
from typing import Optional, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.core.clock import utcnow
from estate_crm.models.delivery import Delivery, Payment
from estate_crm.repositories.base import BaseRepository


class DeliveryRepository(BaseRepository[Delivery]):
    """Repository for Delivery operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Delivery, session)

    async def list_by_agent(self, agent_id: Optional[uuid.UUID] = None) -> List[Delivery]:
        """Deliveries newest first, optionally for one agent."""
        query = select(Delivery)
        if agent_id:
            query = query.where(Delivery.agent_id == agent_id)
        query = query.order_by(Delivery.created_at.desc())
        result = await self.session.exec(query)
        return list(result.all())

    async def update_status(self, delivery_id: uuid.UUID, status: str) -> Optional[Delivery]:
        """Change a delivery's status."""
        delivery = await self.get(delivery_id)
        if not delivery:
            return None

        delivery.status = status
        delivery.updated_at = utcnow()
        self.session.add(delivery)
        await self.session.commit()
        await self.session.refresh(delivery)
        return delivery

    async def exists_for_prospect(self, prospect_id: uuid.UUID) -> bool:
        query = select(Delivery.id).where(Delivery.prospect_id == prospect_id).limit(1)
        result = await self.session.exec(query)
        return result.first() is not None


class PaymentRepository(BaseRepository[Payment]):
    """Repository for Payment operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Payment, session)

    async def list_by_agent(self, agent_id: Optional[uuid.UUID] = None) -> List[Payment]:
        """Payments newest first, optionally for one agent."""
        query = select(Payment)
        if agent_id:
            query = query.where(Payment.agent_id == agent_id)
        query = query.order_by(Payment.created_at.desc())
        result = await self.session.exec(query)
        return list(result.all())
