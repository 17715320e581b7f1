"""
API dependencies - identity resolution and request authorization.

Route guards run their gates in order and stop at the first failure:
authentication, then role, then (where declared) resource ownership.
They never modify the request.
"""
import json
import logging
import uuid
from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.config import settings
from estate_crm.core.exceptions import UnauthenticatedError, ForbiddenError
from estate_crm.core.permissions import (
    Role, allowed_roles, has_permission, ordered_roles, parse_role, role_allowed
)
from estate_crm.core.security import verify_token
from estate_crm.database import get_session
from estate_crm.models.user import User
from estate_crm.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)


async def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session)
) -> Optional[User]:
    """Resolve the bearer token to an active user, or None."""
    if not token:
        return None

    payload = verify_token(token, "access")
    if not payload:
        return None

    try:
        user_id = uuid.UUID(payload.get("user_id"))
    except (TypeError, ValueError):
        return None

    user = await UserRepository(session).get(user_id)
    if not user or not user.is_active:
        return None
    return user


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Authentication gate."""
    if user is None:
        raise UnauthenticatedError()
    return user


def require_roles(*roles: Any):
    """
    Build a guard that admits only users whose role is in `roles`.

    Rejections disclose the allow-list and the caller's role.
    """
    allowed = [Role(role).value for role in roles]

    async def role_guard(request: Request, user: User = Depends(get_current_user)) -> User:
        if not role_allowed(user, allowed):
            logger.warning(
                f"Role gate rejected user {user.id} ({user.role}) on "
                f"{request.method} {request.url.path}; allowed: {allowed}"
            )
            raise ForbiddenError("Access denied", required=allowed, current=user.role)
        return user

    return role_guard


def require_permission(action: Any):
    """Build a guard that admits users allowed to perform `action`."""

    async def permission_guard(request: Request, user: User = Depends(get_current_user)) -> User:
        if not has_permission(user, action):
            required = ordered_roles(allowed_roles(action))
            logger.warning(
                f"Permission '{action}' denied to user {user.id} ({user.role}) on "
                f"{request.method} {request.url.path}"
            )
            raise ForbiddenError("Access denied", required=required, current=user.role)
        return user

    return permission_guard


async def _owner_id(request: Request, field: str) -> Optional[str]:
    """Owner id from the JSON body, falling back to path parameters."""
    value = None
    body = await request.body()
    if body:
        try:
            payload = json.loads(body)
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            value = payload.get(field)

    if not value:
        value = request.path_params.get(field)

    if not value:
        return None
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return str(value)


def require_ownership_or_admin(field: Optional[str] = None):
    """
    Build a guard that rejects non-admins acting on someone else's resource.

    The owner id is read from `field` (default settings.OWNERSHIP_FIELD) in
    the JSON body or path parameters. When the field is absent the request
    passes: there is nothing to compare against.
    """
    field_name = field or settings.OWNERSHIP_FIELD

    async def ownership_guard(request: Request, user: User = Depends(get_current_user)) -> User:
        if parse_role(user.role) is Role.ADMIN:
            return user

        owner_id = await _owner_id(request, field_name)
        if owner_id is None:
            logger.debug(
                f"No '{field_name}' on {request.method} {request.url.path}; ownership not enforced"
            )
            return user

        if owner_id != str(user.id):
            logger.warning(
                f"Ownership gate rejected user {user.id} on {request.method} "
                f"{request.url.path}; owner is {owner_id}"
            )
            raise ForbiddenError("Access denied - resource ownership required")
        return user

    return ownership_guard


# Role-specific guards
require_operator = require_roles(Role.OPERATOR, Role.ADMIN)
require_agent = require_roles(Role.AGENT, Role.ADMIN)
require_admin = require_roles(Role.ADMIN)
