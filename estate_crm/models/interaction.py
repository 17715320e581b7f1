"""
Interaction model - contact history with a prospect.
Logging an interaction moves the prospect's last contact forward.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from estate_crm.core.clock import utcnow
from estate_crm.core.types import UTCDateTime


class InteractionKind(str, Enum):
    CALL = "call"
    SMS = "sms"
    EMAIL = "email"
    VISIT = "visit"
    NOTE = "note"


class InteractionDirection(str, Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class Interaction(SQLModel, table=True):
    """One call, message or meeting with a prospect."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    prospect_id: uuid.UUID = Field(foreign_key="prospect.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)

    kind: str = Field(default=InteractionKind.CALL.value)
    direction: str = Field(default=InteractionDirection.OUTBOUND.value)
    summary: Optional[str] = None
    outcome: Optional[str] = None  # no_answer, voicemail, booked, ...

    occurred_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
