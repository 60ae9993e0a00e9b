"""Auth endpoints: register, login, refresh (rotation), logout; refresh token also travels in a cookie."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Request, Response, status

from app.api.deps import get_auth_service, get_current_user, get_optional_user, get_user_service
from app.core.config import Settings, get_settings
from app.core.errors import UnauthorizedError
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.services.auth import AuthService
from app.services.users import UserService

router = APIRouter()


def set_refresh_cookie(response: Response, refresh_token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        refresh_token,
        max_age=int(settings.refresh_token_lifetime.total_seconds()),
        path=settings.refresh_cookie_path,
        secure=settings.REFRESH_COOKIE_SECURE,
        httponly=True,
        samesite="strict",
    )


def clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        "",
        max_age=0,
        path=settings.refresh_cookie_path,
        secure=settings.REFRESH_COOKIE_SECURE,
        httponly=True,
        samesite="strict",
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """Create a VIEWER account; returns tokens and sets the refresh cookie. 409 if the email is taken."""
    tokens = auth.register(str(body.email), body.password, body.name)
    set_refresh_cookie(response, tokens.refresh_token, settings)
    return tokens


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT access/refresh pair.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    tokens = auth.login(str(body.email), body.password)
    set_refresh_cookie(response, tokens.refresh_token, settings)
    return tokens


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    request: Request,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    body: Annotated[RefreshTokenRequest | None, Body()] = None,
) -> TokenResponse:
    """Rotate the refresh token (cookie first, then JSON body). The old token stops working."""
    token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if not token and body is not None:
        token = body.refresh_token
    if not token:
        raise UnauthorizedError("Refresh token is missing")
    tokens = auth.refresh(token)
    set_refresh_cookie(response, tokens.refresh_token, settings)
    return tokens


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser | None, Depends(get_optional_user)],
) -> MessageResponse:
    """
    End the session in the refresh cookie; without a cookie, an authenticated
    caller is logged out everywhere. Always succeeds and clears the cookie.
    """
    token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if token:
        auth.logout_with_token(token)
    elif user is not None:
        auth.logout(user.id)
    clear_refresh_cookie(response, settings)
    return MessageResponse(message="Logged out")


@router.post("/logout-all", response_model=MessageResponse)
def logout_all(
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Delete every refresh token of the current user (all devices)."""
    auth.logout(user.id)
    clear_refresh_cookie(response, settings)
    return MessageResponse(message="Logged out from all sessions")


@router.get("/me", response_model=UserResponse)
def me(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return users.get_user(user.id)
