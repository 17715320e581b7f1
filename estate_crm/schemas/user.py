"""
User schemas.
"""
import uuid
from typing import List
from datetime import datetime
from pydantic import BaseModel, EmailStr

from estate_crm.core.permissions import Role


class UserCreate(BaseModel):
    """Provision a user account."""
    username: str
    password: str
    name: str
    email: EmailStr
    role: Role = Role.AGENT

    class Config:
        json_schema_extra = {
            "example": {
                "username": "jdupont",
                "password": "securepassword123",
                "name": "Jeanne Dupont",
                "email": "jeanne@agence.fr",
                "role": "agent"
            }
        }


class UserResponse(BaseModel):
    """User details response."""
    id: uuid.UUID
    username: str
    name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class RoleUpdate(BaseModel):
    """Change a user's role."""
    role: Role


class PermissionsResponse(BaseModel):
    """Actions the current user may perform."""
    role: str
    actions: List[str]
