"""Auth service: registration, login, refresh-token rotation, logout and expired-token sweep."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import DuplicateError, UnauthorizedError
from app.core.security import PasswordHasher, TokenCodec
from app.models.base import utcnow
from app.models.refresh_token import RefreshToken
from app.models.user import User, UserRole
from app.repositories.refresh_tokens import RefreshTokenRepository
from app.repositories.users import UserRepository
from app.schemas.auth import TokenResponse, UserResponse

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password (no account enumeration).
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_OR_EXPIRED_TOKEN_MESSAGE = "Invalid or expired token"
UNKNOWN_REFRESH_TOKEN_MESSAGE = "Invalid refresh token"
EXPIRED_REFRESH_TOKEN_MESSAGE = "Refresh token has expired"


class AuthService:
    """
    Orchestrates the credential store, the token codec and the session store.

    Every public operation is one unit of work on the given session: it commits
    on success and rolls back before re-raising on failure. No state is kept
    between calls, so an instance per request is the expected usage.
    """

    def __init__(
        self,
        db: Session,
        codec: TokenCodec,
        password_hasher: PasswordHasher,
        *,
        first_user_is_admin: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.codec = codec
        self.password_hasher = password_hasher
        self.users = UserRepository(db)
        self.refresh_tokens = RefreshTokenRepository(db)
        self.first_user_is_admin = first_user_is_admin
        self.clock = clock

    def register(self, email: str, password: str, name: str) -> TokenResponse:
        """
        Create a VIEWER account and sign it in.

        Raises DuplicateError if the email is already registered, including when a
        concurrent registration wins the unique index.
        """
        with transaction(self.db):
            if self.users.exists_by_email(email):
                raise DuplicateError("User", "email", email)

            role = UserRole.VIEWER
            if self.first_user_is_admin and self.users.count_all() == 0:
                role = UserRole.ADMIN

            user = User(
                email=email,
                password_hash=self.password_hasher.hash(password),
                name=name,
                role=role,
            )
            try:
                self.users.save(user)
            except IntegrityError as e:
                raise DuplicateError("User", "email", email) from e

            response = self._issue_tokens(user)
        logger.info("User registered", extra={"user_id": str(user.id), "role": role.value})
        return response

    def login(self, email: str, password: str) -> TokenResponse:
        """Verify credentials and issue a new token pair. Raises UnauthorizedError."""
        with transaction(self.db):
            user = self.users.find_by_email(email)
            if user is None:
                verified = self.password_hasher.verify_dummy(password)
            else:
                verified = self.password_hasher.matches(password, user.password_hash)
            if not verified:
                logger.info("Login failed")
                raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
            response = self._issue_tokens(user)
        logger.info("User logged in", extra={"user_id": str(user.id)})
        return response

    def refresh(self, refresh_token: str) -> TokenResponse:
        """
        Exchange a refresh token for a new pair and invalidate the old one.

        Checks, in order: signature and exp claim, a stored row, the stored expiry.
        An expired row is deleted before failing. The old row is deleted before the
        new one is written, so of two concurrent calls with the same token only the
        one whose delete removes the row succeeds.
        """
        if not self.codec.verify(refresh_token):
            logger.info("Refresh rejected", extra={"reason": "invalid_signature_or_exp"})
            raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MESSAGE)

        with transaction(self.db):
            stored = self.refresh_tokens.find_by_token(refresh_token)
            if stored is None:
                logger.info("Refresh rejected", extra={"reason": "not_found"})
                raise UnauthorizedError(UNKNOWN_REFRESH_TOKEN_MESSAGE)

            if not stored.is_expired(self.clock()):
                user = stored.user
                if self.refresh_tokens.delete(stored) == 0:
                    logger.info("Refresh rejected", extra={"reason": "already_rotated"})
                    raise UnauthorizedError(UNKNOWN_REFRESH_TOKEN_MESSAGE)
                response = self._issue_tokens(user)
                logger.debug("Refresh token rotated", extra={"user_id": str(user.id)})
                return response

            self.refresh_tokens.delete(stored)

        logger.info("Refresh rejected", extra={"reason": "expired"})
        raise UnauthorizedError(EXPIRED_REFRESH_TOKEN_MESSAGE)

    def logout(self, user_id: uuid.UUID) -> int:
        """Delete every refresh token of the user (log out everywhere). Idempotent."""
        with transaction(self.db):
            deleted = self.refresh_tokens.delete_all_by_user_id(user_id)
        logger.info("User logged out", extra={"user_id": str(user_id), "sessions_deleted": deleted})
        return deleted

    def logout_with_token(self, refresh_token: str) -> None:
        """Delete the one matching refresh token, if any. Idempotent."""
        with transaction(self.db):
            deleted = self.refresh_tokens.delete_by_token(refresh_token)
        logger.info("Session logged out", extra={"sessions_deleted": deleted})

    def cleanup_expired_tokens(self) -> int:
        """Bulk-delete refresh tokens whose stored expiry has passed; return the count."""
        now = self.clock()
        with transaction(self.db):
            deleted = self.refresh_tokens.delete_expired(now)
        if deleted > 0:
            logger.info(
                "Expired refresh tokens deleted",
                extra={"cutoff": now.isoformat(), "tokens_deleted": deleted},
            )
        return deleted

    def _issue_tokens(self, user: User) -> TokenResponse:
        access_token = self.codec.issue_access_token(user.id, user.email, user.role)
        refresh_token = self.codec.issue_refresh_token(user.id, user.email, user.role)
        self.refresh_tokens.save(
            RefreshToken(
                user_id=user.id,
                token=refresh_token,
                expires_at=self.clock() + self.codec.refresh_token_lifetime,
            )
        )
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            user=UserResponse.model_validate(user),
        )
