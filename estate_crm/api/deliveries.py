"""
Delivery API routes (operators).
"""
import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.database import get_session
from estate_crm.core.permissions import Action
from estate_crm.services.delivery_service import DeliveryService
from estate_crm.schemas.delivery import DeliveryCreate, DeliveryResponse, DeliveryStatusUpdate
from estate_crm.api.deps import require_permission
from estate_crm.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/deliveries", tags=["deliveries"])

require_deliveries = require_permission(Action.CREATE_DELIVERIES)


@router.get("/", response_model=List[DeliveryResponse])
async def list_deliveries(
    agent_id: Optional[uuid.UUID] = None,
    current_user: User = Depends(require_deliveries),
    session: AsyncSession = Depends(get_session)
):
    """List deliveries, newest first."""
    delivery_service = DeliveryService(session)
    return await delivery_service.list(agent_id)


@router.post("/", response_model=DeliveryResponse, status_code=201)
async def create_delivery(
    delivery_data: DeliveryCreate,
    current_user: User = Depends(require_deliveries),
    session: AsyncSession = Depends(get_session)
):
    """Deliver a prospect to an agent."""
    delivery_service = DeliveryService(session)
    return await delivery_service.create(current_user, delivery_data)


@router.put("/{delivery_id}/status", response_model=DeliveryResponse)
async def update_delivery_status(
    delivery_id: uuid.UUID,
    status_data: DeliveryStatusUpdate,
    current_user: User = Depends(require_deliveries),
    session: AsyncSession = Depends(get_session)
):
    """Change a delivery's status."""
    delivery_service = DeliveryService(session)
    return await delivery_service.update_status(current_user, delivery_id, status_data.status)
