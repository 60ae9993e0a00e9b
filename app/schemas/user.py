"""Request/response schemas for user account endpoints."""

from pydantic import BaseModel, Field

from app.core.security import NAME_MAX_LEN, NAME_MIN_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import UserRole
from app.schemas.auth import UserResponse


class UpdateProfileRequest(BaseModel):
    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class UpdateRoleRequest(BaseModel):
    role: UserRole


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserResponse]
