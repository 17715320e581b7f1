"""
Delivery and payment models.
Operators deliver qualified prospects to agents and record what agents pay.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from estate_crm.core.clock import utcnow
from estate_crm.core.types import UTCDateTime


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    ACCEPTED = "accepted"
    REFUSED = "refused"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Delivery(SQLModel, table=True):
    """A prospect handed to an agent for a price."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    prospect_id: uuid.UUID = Field(foreign_key="prospect.id", index=True)
    agent_id: uuid.UUID = Field(foreign_key="user.id", index=True)

    price: int = Field(default=0)  # euros
    status: str = Field(default=DeliveryStatus.PENDING.value, index=True)
    delivery_url: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class Payment(SQLModel, table=True):
    """Money collected from an agent, optionally for one delivery."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    agent_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    delivery_id: Optional[uuid.UUID] = Field(default=None, foreign_key="delivery.id", index=True)

    amount: int  # euros
    status: str = Field(default=PaymentStatus.PENDING.value, index=True)
    method: Optional[str] = None  # card, transfer, ...
    reference: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
