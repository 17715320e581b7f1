"""
Scoring schemas.
"""
from typing import Optional, Dict, List
from datetime import datetime
from pydantic import BaseModel, Field


class ScorePreviewRequest(BaseModel):
    """Prospect attributes to score; anything left out scores zero."""
    status: Optional[str] = None
    is_hot_lead: Optional[bool] = None
    exclusive: Optional[bool] = None
    budget: Optional[float] = None
    estimated_price: Optional[float] = None
    timeline: Optional[str] = None
    last_contact_at: Optional[datetime] = None
    source: Optional[str] = None
    consent_given: Optional[bool] = None
    commission_rate: Optional[float] = None

    class Config:
        json_schema_extra = {
            "example": {
                "status": "meeting_scheduled",
                "is_hot_lead": True,
                "budget": 650000,
                "timeline": "urgent",
                "source": "referral"
            }
        }


class ScorePreviewResponse(BaseModel):
    """Score with the points each term contributed."""
    score: int
    breakdown: Dict[str, int]


class SyncFailure(BaseModel):
    """A prospect whose score could not be written."""
    prospect_id: str
    error: str


class ScoreSyncResponse(BaseModel):
    """Result of a score synchronization pass."""
    scanned: int = 0
    updated: int = 0
    failed: List[SyncFailure] = Field(default_factory=list)
    started_at: Optional[datetime] = None
