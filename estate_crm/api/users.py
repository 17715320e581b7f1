"""
User API routes.
"""
import uuid
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.database import get_session
from estate_crm.core.permissions import Role, permitted_actions
from estate_crm.services.user_service import UserService
from estate_crm.services.auth_service import AuthService
from estate_crm.schemas.user import UserCreate, UserResponse, RoleUpdate, PermissionsResponse
from estate_crm.api.deps import get_current_user, require_operator, require_admin
from estate_crm.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """Get current user profile."""
    return current_user


@router.get("/me/permissions", response_model=PermissionsResponse)
async def get_current_user_permissions(current_user: User = Depends(get_current_user)):
    """Actions the current user may perform, for deciding what to show."""
    return PermissionsResponse(role=current_user.role, actions=permitted_actions(current_user))


@router.get("/", response_model=List[UserResponse])
async def list_users(
    role: str = Role.AGENT.value,
    current_user: User = Depends(require_operator),
    session: AsyncSession = Depends(get_session)
):
    """List active users with a role (agents by default)."""
    user_service = UserService(session)
    return await user_service.list_by_role(role)


@router.post("/", response_model=UserResponse, status_code=201)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Provision a user account."""
    auth_service = AuthService(session)
    return await auth_service.create_user(user_data)


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: uuid.UUID,
    role_data: RoleUpdate,
    current_user: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Change a user's role."""
    user_service = UserService(session)
    return await user_service.change_role(current_user, user_id, role_data.role)
