"""
Automation rule schemas.
"""
import uuid
from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from estate_crm.models.automation import RuleTrigger


class RuleCreate(BaseModel):
    """Create an automation rule."""
    name: str = Field(min_length=1)
    trigger: RuleTrigger
    action: str = Field(min_length=1)
    payload: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "name": "No Answer Follow-up",
                "trigger": "outcome:no_answer",
                "action": "send_sms:A,create_task:2d",
                "payload": {"template": "A", "followUpDays": 2},
                "is_active": True
            }
        }


class RuleUpdate(BaseModel):
    """Update an automation rule; omitted fields are left alone."""
    name: Optional[str] = Field(default=None, min_length=1)
    trigger: Optional[RuleTrigger] = None
    action: Optional[str] = Field(default=None, min_length=1)
    payload: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class RuleResponse(BaseModel):
    """Automation rule response."""
    id: uuid.UUID
    name: str
    trigger: str
    action: str
    payload: Dict[str, Any]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
