"""User account endpoints: own profile and password, plus admin-only user management."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_user_service, require_admin
from app.schemas.auth import CurrentUser, MessageResponse, UserResponse
from app.schemas.user import (
    ChangePasswordRequest,
    UpdateProfileRequest,
    UpdateRoleRequest,
    UsersListResponse,
)
from app.services.users import UserService

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_my_profile(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return users.get_user(user.id)


@router.put("/me", response_model=UserResponse)
def update_my_profile(
    body: UpdateProfileRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return users.update_profile(user.id, body.name)


@router.put("/me/password", response_model=MessageResponse)
def change_my_password(
    body: ChangePasswordRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> MessageResponse:
    """Change own password; 400 if the current password is wrong."""
    users.change_password(user.id, body.current_password, body.new_password)
    return MessageResponse(message="Password changed")


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=users.list_users())


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: uuid.UUID,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return users.get_user(user_id)


@router.put("/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: uuid.UUID,
    body: UpdateRoleRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Promote or demote a user (admin only). Takes effect on the user's next token."""
    return users.update_role(user_id, body.role)
