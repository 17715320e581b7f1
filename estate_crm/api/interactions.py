"""
Interaction API routes - contact history.
"""
import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.database import get_session
from estate_crm.services.interaction_service import InteractionService
from estate_crm.schemas.interaction import InteractionCreate, InteractionResponse
from estate_crm.api.deps import get_current_user
from estate_crm.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/interactions", tags=["interactions"])


@router.get("/", response_model=List[InteractionResponse])
async def list_interactions(
    prospect_id: Optional[uuid.UUID] = None,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List interactions, newest first."""
    interaction_service = InteractionService(session)
    return await interaction_service.list(current_user, prospect_id)


@router.post("/", response_model=InteractionResponse, status_code=201)
async def log_interaction(
    interaction_data: InteractionCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Log a contact; the prospect's last contact and score follow."""
    interaction_service = InteractionService(session)
    return await interaction_service.log(current_user, interaction_data)
