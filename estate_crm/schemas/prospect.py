"""
Prospect schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator

from estate_crm.core.clock import as_utc


class ProspectBase(BaseModel):
    """Fields shared by create and update; every field is optional."""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    city: Optional[str] = None
    kind: Optional[str] = None
    property_type: Optional[str] = None
    budget: Optional[int] = None
    estimated_price: Optional[int] = None
    commission_rate: Optional[float] = None
    exclusive: Optional[bool] = None
    motivation: Optional[str] = None
    timeline: Optional[str] = None
    source: Optional[str] = None
    consent_given: Optional[bool] = None
    is_hot_lead: Optional[bool] = None
    status: Optional[str] = None
    last_contact_at: Optional[datetime] = None
    next_action_at: Optional[datetime] = None
    notes: Optional[str] = None
    agent_id: Optional[uuid.UUID] = None

    @field_validator("last_contact_at", "next_action_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        try:
            return as_utc(value)
        except OverflowError:
            raise ValueError("timestamp is out of range once converted to UTC")


class ProspectCreate(ProspectBase):
    """Create a new prospect. Owner defaults to the caller."""
    full_name: str

    class Config:
        json_schema_extra = {
            "example": {
                "full_name": "Marie Martin",
                "phone": "+33612345678",
                "kind": "seller",
                "city": "Lyon",
                "estimated_price": 450000,
                "commission_rate": 0.05,
                "exclusive": True,
                "timeline": "under_3_months",
                "source": "referral",
                "consent_given": True,
                "status": "new"
            }
        }


class ProspectUpdate(ProspectBase):
    """Update an existing prospect."""
    pass


class ProspectResponse(BaseModel):
    """Prospect response."""
    id: uuid.UUID
    agent_id: Optional[uuid.UUID]
    full_name: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    address: Optional[str]
    city: Optional[str]
    kind: Optional[str]
    property_type: Optional[str]
    budget: Optional[int]
    estimated_price: Optional[int]
    commission_rate: Optional[float]
    exclusive: bool
    motivation: Optional[str]
    timeline: Optional[str]
    source: Optional[str]
    consent_given: bool
    is_hot_lead: bool
    status: str
    score: int
    last_contact_at: Optional[datetime]
    next_action_at: Optional[datetime]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AssignRequest(BaseModel):
    """Hand a prospect over to another agent."""
    agent_id: uuid.UUID
