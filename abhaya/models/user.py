"""
Identity models.

Users are authenticated by the identity provider; the backend only sees the
decoded token and passes it explicitly to the code that needs it.
"""

from pydantic import BaseModel, Field
from typing import Optional


class AuthenticatedUser(BaseModel):
    """Caller identity extracted from a verified ID token."""
    uid: str = Field(..., description="Identity provider user ID")
    email: Optional[str] = Field(None, description="Account email (absent for anonymous sign-in)")
    is_anonymous: bool = Field(default=False, description="Signed in anonymously")
    is_authority: bool = Field(default=False, description="Email is on the authority allow-list")
