"""
Authentication API schemas.

Field names are camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserResponse(BaseModel):
    """Public user representation."""

    id: str
    email: str
    username: str
    displayName: Optional[str] = None
    avatar: Optional[str] = None


class RegisterRequest(BaseModel):
    """
    Registration payload.

    Only types are checked here; username, password and display name
    rules are applied by the use case so all failures are reported
    together.
    """

    email: EmailStr
    username: str
    password: str
    displayName: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refreshToken: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Tokens and user returned by register, login and refresh."""

    accessToken: str
    refreshToken: str
    user: UserResponse
