"""
Scoring API routes.
"""
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.database import get_session
from estate_crm.services.scoring_service import calculate_score, score_breakdown
from estate_crm.services.score_sync_service import run_score_sync
from estate_crm.core.clock import system_clock
from estate_crm.schemas.scoring import ScorePreviewRequest, ScorePreviewResponse, ScoreSyncResponse
from estate_crm.api.deps import get_current_user, require_admin
from estate_crm.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/scoring", tags=["scoring"])


@router.post("/preview", response_model=ScorePreviewResponse)
async def preview_score(
    request: ScorePreviewRequest,
    current_user: User = Depends(get_current_user)
):
    """Score arbitrary prospect attributes without saving anything."""
    now = system_clock.now()
    return ScorePreviewResponse(
        score=calculate_score(request, now=now),
        breakdown=score_breakdown(request, now=now)
    )


@router.post("/sync", response_model=ScoreSyncResponse)
async def sync_scores(
    current_user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Recompute and persist every prospect's score."""
    return await run_score_sync(session)
