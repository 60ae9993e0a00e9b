"""FastAPI dependencies: services per request, bearer-token identity and role checks."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import (
    InvalidTokenError,
    PasswordHasher,
    TokenCodec,
    build_password_hasher,
    build_token_codec,
)
from app.repositories.users import UserRepository
from app.schemas.auth import CurrentUser
from app.services.auth import AuthService
from app.services.users import UserService

bearer_scheme = HTTPBearer(auto_error=False)

INVALID_ACCESS_TOKEN_MESSAGE = "Invalid or expired token"


@lru_cache
def get_token_codec() -> TokenCodec:
    """One codec per process; it only holds read-only settings."""
    return build_token_codec(get_settings())


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return build_password_hasher(get_settings())


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService(
        db,
        codec,
        password_hasher,
        first_user_is_admin=settings.FIRST_USER_IS_ADMIN,
    )


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    return UserService(db, password_hasher)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser | None:
    """Identity from a valid Bearer token, or None when the header is missing or invalid."""
    if credentials is None:
        return None
    token = credentials.credentials
    if not codec.verify(token):
        return None
    try:
        user_id = codec.extract_subject(token)
    except InvalidTokenError:
        return None
    user = UserRepository(db).get(user_id)
    if user is None:
        return None
    return CurrentUser.model_validate(user)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    user: Annotated[CurrentUser | None, Depends(get_optional_user)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT for an existing user. Raises 401 otherwise."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    if user is None:
        raise UnauthorizedError(INVALID_ACCESS_TOKEN_MESSAGE)
    return user


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role ADMIN. Raises 403 for viewers."""
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user
