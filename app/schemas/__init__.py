"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.user import (
    ChangePasswordRequest,
    UpdateProfileRequest,
    UpdateRoleRequest,
    UsersListResponse,
)

__all__ = [
    "ChangePasswordRequest",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TokenResponse",
    "UpdateProfileRequest",
    "UpdateRoleRequest",
    "UserResponse",
    "UsersListResponse",
]
