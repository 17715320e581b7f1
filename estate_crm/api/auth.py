"""
Authentication API routes.
"""
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.database import get_session
from estate_crm.services.auth_service import AuthService
from estate_crm.schemas.auth import TokenResponse

router = APIRouter(prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(get_session)
):
    """Login and get an access token."""
    auth_service = AuthService(session)
    return await auth_service.login(form_data.username, form_data.password)
