"""
Request and response models for the token endpoints.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    # Missing or null fields decode as empty strings and are left to the authenticator
    email: Optional[str] = Field(default="", description="User identifier")
    password: Optional[str] = Field(default="", description="Plain password")

    @field_validator("email", "password", mode="after")
    @classmethod
    def null_as_empty(cls, value: Optional[str]) -> str:
        return value if value is not None else ""


class TokenResponse(BaseModel):
    """Token returned by login and refresh."""

    token: str = Field(..., description="Signed bearer token")


class IdentityResponse(BaseModel):
    """Identity echoed back by the sample protected endpoint."""

    user_id: str
    claims: Dict[str, Any] = Field(default_factory=dict)
