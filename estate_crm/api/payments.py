"""
Payment API routes (operators).
"""
import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.database import get_session
from estate_crm.core.permissions import Action
from estate_crm.services.delivery_service import PaymentService
from estate_crm.schemas.delivery import PaymentCreate, PaymentResponse
from estate_crm.api.deps import require_permission
from estate_crm.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/payments", tags=["payments"])

require_payments = require_permission(Action.VIEW_PAYMENTS)


@router.get("/", response_model=List[PaymentResponse])
async def list_payments(
    agent_id: Optional[uuid.UUID] = None,
    current_user: User = Depends(require_payments),
    session: AsyncSession = Depends(get_session)
):
    """List payments, newest first."""
    payment_service = PaymentService(session)
    return await payment_service.list(agent_id)


@router.post("/", response_model=PaymentResponse, status_code=201)
async def create_payment(
    payment_data: PaymentCreate,
    current_user: User = Depends(require_payments),
    session: AsyncSession = Depends(get_session)
):
    """Record a payment from an agent."""
    payment_service = PaymentService(session)
    return await payment_service.create(current_user, payment_data)
