"""
User model.
Agents own prospects; operators and admins work across agents.
"""
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from estate_crm.core.clock import utcnow
from estate_crm.core.permissions import Role
from estate_crm.core.types import UTCDateTime


class User(SQLModel, table=True):
    """
    User account with authentication and role.
    The role is one of agent, operator, admin and only an admin changes it.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Auth
    username: str = Field(unique=True, index=True)
    password_hash: str

    # Profile
    name: str
    email: str = Field(index=True)

    # Authorization
    role: str = Field(default=Role.AGENT.value, index=True)  # agent, operator, admin
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
