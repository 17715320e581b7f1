"""
Prospect model - the agent's sales lead.
Carries the attributes the priority score is computed from.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from estate_crm.core.clock import utcnow
from estate_crm.core.types import UTCDateTime


class ProspectStatus(str, Enum):
    """Pipeline stages."""
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    MEETING_SCHEDULED = "meeting_scheduled"
    MANDATE_PENDING = "mandate_pending"
    MANDATE_SIGNED = "mandate_signed"
    WON = "won"
    LOST = "lost"
    NO_ANSWER = "no_answer"


class Timeline(str, Enum):
    """How soon the prospect wants to move."""
    URGENT = "urgent"
    ONE_MONTH = "1_month"
    UNDER_THREE_MONTHS = "under_3_months"
    TWO_MONTHS = "2_months"
    THREE_MONTHS = "3_months"
    SIX_MONTHS = "6_months"
    OVER_SIX_MONTHS = "over_6_months"


class LeadSource(str, Enum):
    """Acquisition channels."""
    REFERRAL = "referral"
    WEBSITE = "website"
    GOOGLE_ADS = "google_ads"
    FACEBOOK_ADS = "facebook_ads"
    DOOR_TO_DOOR = "door_to_door"
    CLASSIFIEDS = "classifieds"
    OTHER = "other"


class ProspectKind(str, Enum):
    SELLER = "seller"
    BUYER = "buyer"


class Prospect(SQLModel, table=True):
    """
    Prospect entity - a seller or buyer followed by one agent.
    `score` is a cache of calculate_score() and is rewritten by the score sync.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    agent_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id", index=True)

    # Contact
    full_name: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, index=True)

    # Property
    kind: Optional[str] = None  # seller, buyer
    property_type: Optional[str] = None
    budget: Optional[int] = Field(default=0)
    estimated_price: Optional[int] = Field(default=0)
    commission_rate: Optional[float] = Field(default=0.04)
    exclusive: bool = Field(default=False)

    # Qualification
    motivation: Optional[str] = None
    timeline: Optional[str] = None
    source: Optional[str] = Field(default=None, index=True)
    consent_given: bool = Field(default=False)  # GDPR contact consent
    is_hot_lead: bool = Field(default=False, index=True)
    status: str = Field(default=ProspectStatus.NEW.value, index=True)
    score: int = Field(default=50, index=True)

    # Follow-up
    last_contact_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    next_action_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    notes: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
