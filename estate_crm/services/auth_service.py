"""
Authentication service - login and account provisioning.
"""
import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.core.exceptions import UnauthenticatedError, AlreadyExistsError
from estate_crm.core.security import verify_password, get_password_hash, create_access_token
from estate_crm.models.user import User
from estate_crm.repositories.user_repo import UserRepository
from estate_crm.schemas.auth import TokenResponse
from estate_crm.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def authenticate(self, username: str, password: str) -> User:
        """Check credentials and return the user."""
        user = await self.user_repo.get_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            raise UnauthenticatedError("Incorrect username or password")

        if not user.is_active:
            raise UnauthenticatedError("User account is deactivated")

        return user

    async def login(self, username: str, password: str) -> TokenResponse:
        """Authenticate user and return an access token."""
        user = await self.authenticate(username, password)

        token_data = {
            "sub": user.username,
            "user_id": str(user.id),
            "role": user.role
        }
        access_token = create_access_token(token_data)
        logger.info(f"User {user.id} logged in")

        return TokenResponse(
            access_token=access_token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        )

    async def create_user(self, user_data: UserCreate) -> User:
        """Provision a new account."""
        if await self.user_repo.get_by_username(user_data.username):
            raise AlreadyExistsError("User", "username", user_data.username)

        data = user_data.model_dump(exclude={"password"})
        data["role"] = user_data.role.value
        data["password_hash"] = get_password_hash(user_data.password)
        user = await self.user_repo.create(data)
        logger.info(f"Created {user.role} account {user.username}")
        return user
