"""
Prospects API routes.
"""
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.database import get_session
from estate_crm.core.permissions import Action
from estate_crm.services.prospect_service import ProspectService
from estate_crm.schemas.prospect import ProspectCreate, ProspectUpdate, ProspectResponse, AssignRequest
from estate_crm.api.deps import get_current_user, require_ownership_or_admin, require_permission
from estate_crm.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/prospects", tags=["prospects"])

# Agents may only create or update prospects for themselves
require_own_prospect = require_ownership_or_admin("agent_id")


@router.get("/")
async def list_prospects(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    agent_id: Optional[uuid.UUID] = None,
    status: Optional[str] = None,
    min_score: Optional[int] = Query(None, ge=0, le=100),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List prospects, highest score first."""
    prospect_service = ProspectService(session)
    return await prospect_service.list(
        current_user,
        agent_id=agent_id,
        status=status,
        min_score=min_score,
        page=page,
        limit=limit
    )


@router.post("/", response_model=ProspectResponse, status_code=201)
async def create_prospect(
    prospect_data: ProspectCreate,
    current_user: User = Depends(require_own_prospect),
    session: AsyncSession = Depends(get_session)
):
    """Create a new prospect with auto-scoring."""
    prospect_service = ProspectService(session)
    return await prospect_service.create(current_user, prospect_data)


@router.get("/{prospect_id}", response_model=ProspectResponse)
async def get_prospect(
    prospect_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get a prospect by ID."""
    prospect_service = ProspectService(session)
    return await prospect_service.get(current_user, prospect_id)


@router.put("/{prospect_id}", response_model=ProspectResponse)
async def update_prospect(
    prospect_id: uuid.UUID,
    prospect_data: ProspectUpdate,
    current_user: User = Depends(require_own_prospect),
    session: AsyncSession = Depends(get_session)
):
    """Update a prospect; its score is recomputed."""
    prospect_service = ProspectService(session)
    return await prospect_service.update(current_user, prospect_id, prospect_data)


@router.delete("/{prospect_id}", status_code=204)
async def delete_prospect(
    prospect_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Delete a prospect."""
    prospect_service = ProspectService(session)
    await prospect_service.delete(current_user, prospect_id)


@router.post("/{prospect_id}/assign", response_model=ProspectResponse)
async def assign_prospect(
    prospect_id: uuid.UUID,
    request: AssignRequest,
    current_user: User = Depends(require_permission(Action.ASSIGN_LEADS)),
    session: AsyncSession = Depends(get_session)
):
    """Hand a prospect over to another agent."""
    prospect_service = ProspectService(session)
    return await prospect_service.assign(current_user, prospect_id, request.agent_id)
