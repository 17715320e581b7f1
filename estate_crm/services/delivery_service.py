"""
Delivery service - prospects delivered to agents, and agent payments.
Callers are gated by the create_deliveries / view_payments permissions.
"""
import logging
import uuid
from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.core.exceptions import NotFoundError, ValidationError
from estate_crm.models.delivery import Delivery, DeliveryStatus, Payment
from estate_crm.models.user import User
from estate_crm.repositories.delivery_repo import DeliveryRepository, PaymentRepository
from estate_crm.repositories.prospect_repo import ProspectRepository
from estate_crm.schemas.delivery import DeliveryCreate, PaymentCreate
from estate_crm.services.user_service import UserService

logger = logging.getLogger(__name__)


class DeliveryService:
    """Service for delivery operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.delivery_repo = DeliveryRepository(session)
        self.prospect_repo = ProspectRepository(session)
        self.users = UserService(session)

    async def list(self, agent_id: Optional[uuid.UUID] = None) -> List[Delivery]:
        return await self.delivery_repo.list_by_agent(agent_id)

    async def create(self, user: User, data: DeliveryCreate) -> Delivery:
        """Deliver a prospect to an agent who may receive leads."""
        if not await self.prospect_repo.get(data.prospect_id):
            raise NotFoundError("Prospect", str(data.prospect_id))
        agent = await self.users.get_lead_recipient(data.agent_id)

        delivery = await self.delivery_repo.create({
            **data.model_dump(),
            "agent_id": agent.id,
        })
        logger.info(f"Delivery {delivery.id} of prospect {data.prospect_id} to {agent.id} by {user.id}")
        return delivery

    async def update_status(self, user: User, delivery_id: uuid.UUID, status: DeliveryStatus) -> Delivery:
        delivery = await self.delivery_repo.update_status(delivery_id, status.value)
        if not delivery:
            raise NotFoundError("Delivery", str(delivery_id))
        logger.info(f"Delivery {delivery_id} marked {status.value} by {user.id}")
        return delivery


class PaymentService:
    """Service for payment operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.payment_repo = PaymentRepository(session)
        self.delivery_repo = DeliveryRepository(session)
        self.users = UserService(session)

    async def list(self, agent_id: Optional[uuid.UUID] = None) -> List[Payment]:
        return await self.payment_repo.list_by_agent(agent_id)

    async def create(self, user: User, data: PaymentCreate) -> Payment:
        """Record a payment; a linked delivery must belong to the same agent."""
        agent = await self.users.get(data.agent_id)

        if data.delivery_id:
            delivery = await self.delivery_repo.get(data.delivery_id)
            if not delivery:
                raise NotFoundError("Delivery", str(data.delivery_id))
            if delivery.agent_id != agent.id:
                raise ValidationError("Delivery belongs to another agent", field="delivery_id")

        values = data.model_dump()
        values["status"] = data.status.value
        payment = await self.payment_repo.create(values)
        logger.info(f"Payment {payment.id} of {payment.amount} from {agent.id} recorded by {user.id}")
        return payment
