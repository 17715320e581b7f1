"""
Automation rule API routes (operators).
"""
import uuid
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.database import get_session
from estate_crm.core.permissions import Action
from estate_crm.services.automation_service import RuleService
from estate_crm.schemas.automation import RuleCreate, RuleUpdate, RuleResponse
from estate_crm.api.deps import require_permission
from estate_crm.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/rules", tags=["automation"])

require_automation = require_permission(Action.MANAGE_AUTOMATION)


@router.get("/", response_model=List[RuleResponse])
async def list_rules(
    current_user: User = Depends(require_automation),
    session: AsyncSession = Depends(get_session)
):
    """List automation rules by name."""
    rule_service = RuleService(session)
    return await rule_service.list()


@router.post("/", response_model=RuleResponse, status_code=201)
async def create_rule(
    rule_data: RuleCreate,
    current_user: User = Depends(require_automation),
    session: AsyncSession = Depends(get_session)
):
    """Create an automation rule."""
    rule_service = RuleService(session)
    return await rule_service.create(rule_data)


@router.patch("/{rule_id}", response_model=RuleResponse)
async def update_rule(
    rule_id: uuid.UUID,
    rule_data: RuleUpdate,
    current_user: User = Depends(require_automation),
    session: AsyncSession = Depends(get_session)
):
    """Update an automation rule, e.g. to switch it off."""
    rule_service = RuleService(session)
    return await rule_service.update(rule_id, rule_data)
