"""
Interaction schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator

from estate_crm.core.clock import as_utc
from estate_crm.models.interaction import InteractionKind, InteractionDirection


class InteractionCreate(BaseModel):
    """Log a contact with a prospect. `occurred_at` defaults to now."""
    prospect_id: uuid.UUID
    kind: InteractionKind = InteractionKind.CALL
    direction: InteractionDirection = InteractionDirection.OUTBOUND
    summary: Optional[str] = None
    outcome: Optional[str] = None
    occurred_at: Optional[datetime] = None

    @field_validator("occurred_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        try:
            return as_utc(value)
        except OverflowError:
            raise ValueError("timestamp is out of range once converted to UTC")

    class Config:
        json_schema_extra = {
            "example": {
                "prospect_id": "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d",
                "kind": "call",
                "direction": "outbound",
                "summary": "Discussed valuation, visit next week",
                "outcome": "booked"
            }
        }


class InteractionResponse(BaseModel):
    id: uuid.UUID
    prospect_id: uuid.UUID
    user_id: uuid.UUID
    kind: str
    direction: str
    summary: Optional[str]
    outcome: Optional[str]
    occurred_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True
