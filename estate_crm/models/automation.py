"""
Automation rule model.
A rule pairs a trigger (an event or a condition on prospects) with follow-up actions.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from sqlalchemy.dialects.postgresql import JSONB

from estate_crm.core.clock import utcnow
from estate_crm.core.types import UTCDateTime


class RuleTrigger(str, Enum):
    NO_ANSWER = "outcome:no_answer"
    VOICEMAIL = "outcome:voicemail"
    BOOKED = "status:booked"
    DELIVERY_UNCONTACTED = "delivery:uncontacted_24h"
    PROSPECT_IDLE = "lead:idle_7d"


class AutomationRule(SQLModel, table=True):
    __tablename__ = "automation_rule"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)
    trigger: str = Field(index=True)
    action: str  # e.g. "send_sms:A,create_task:2d"

    # Action parameters (template, delays, ...)
    payload: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB(), "postgresql"))
    )

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
