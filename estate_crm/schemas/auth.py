"""
Authentication schemas.
"""
from pydantic import BaseModel


class TokenResponse(BaseModel):
    """Token response after login."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
