"""Request/response schemas for auth endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)
from app.models.user import UserRole


class RegisterRequest(BaseModel):
    """New account: new registrants always start as VIEWER."""

    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN, description="Email (login id)")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    name: str = Field(
        ..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Display name"
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN, description="Email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RefreshTokenRequest(BaseModel):
    """Optional body for POST /auth/refresh; the cookie takes precedence."""

    refresh_token: str | None = Field(default=None, description="Refresh token")


class UserResponse(BaseModel):
    """Public user summary (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    role: UserRole
    created_at: datetime


class TokenResponse(BaseModel):
    """Access/refresh token pair returned after register, login and refresh."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token (also set as HTTP-only cookie)")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserResponse


class CurrentUser(BaseModel):
    """Authenticated user (id, email, role) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class MessageResponse(BaseModel):
    message: str
