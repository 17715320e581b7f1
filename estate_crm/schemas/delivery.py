"""
Delivery and payment schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from estate_crm.models.delivery import DeliveryStatus, PaymentStatus


class DeliveryCreate(BaseModel):
    """Deliver a prospect to an agent."""
    prospect_id: uuid.UUID
    agent_id: uuid.UUID
    price: int = Field(default=0, ge=0)
    delivery_url: Optional[str] = None


class DeliveryStatusUpdate(BaseModel):
    status: DeliveryStatus


class DeliveryResponse(BaseModel):
    """Delivery response."""
    id: uuid.UUID
    prospect_id: uuid.UUID
    agent_id: uuid.UUID
    price: int
    status: str
    delivery_url: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PaymentCreate(BaseModel):
    """Record a payment from an agent."""
    agent_id: uuid.UUID
    amount: int = Field(gt=0)
    delivery_id: Optional[uuid.UUID] = None
    status: PaymentStatus = PaymentStatus.PENDING
    method: Optional[str] = None
    reference: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "agent_id": "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d",
                "amount": 150,
                "status": "paid",
                "method": "transfer"
            }
        }


class PaymentResponse(BaseModel):
    """Payment response."""
    id: uuid.UUID
    agent_id: uuid.UUID
    delivery_id: Optional[uuid.UUID]
    amount: int
    status: str
    method: Optional[str]
    reference: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
