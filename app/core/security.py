"""Password hashing and JWT creation/verification for authentication."""

import secrets
import uuid
from datetime import UTC, datetime, timedelta
from functools import cached_property
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.models.user import UserRole

if TYPE_CHECKING:
    from app.core.config import Settings

# Min/max lengths for email, name and password validation (input validation).
EMAIL_MAX_LEN = 255
NAME_MIN_LEN = 2
NAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 100

# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72


class InvalidTokenError(Exception):
    """Raised when a token cannot be decoded, fails signature check, or lacks a claim."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class PasswordHasher:
    """Salted bcrypt hashing. Do not store or log plain passwords."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def matches(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash; malformed hashes never match."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    @cached_property
    def _dummy_hash(self) -> str:
        return self.hash(secrets.token_hex(16))

    def verify_dummy(self, plain_password: str) -> bool:
        """
        Spend the same bcrypt work as matches() for an account that does not exist.

        Always False. The dummy hash is built once per hasher at the configured cost.
        """
        self.matches(plain_password, self._dummy_hash)
        return False


class TokenCodec:
    """
    Issue and verify signed, expiring JWTs carrying (sub, email, role).

    Access and refresh tokens have the same claims and differ only by lifetime;
    a refresh token is revocable because the auth service also persists it.
    The codec holds read-only configuration and is safe to share across threads.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        access_token_lifetime: timedelta = timedelta(hours=1),
        refresh_token_lifetime: timedelta = timedelta(days=7),
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self._access_token_lifetime = access_token_lifetime
        self._refresh_token_lifetime = refresh_token_lifetime

    @property
    def access_token_lifetime(self) -> timedelta:
        return self._access_token_lifetime

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return self._refresh_token_lifetime

    def issue(
        self,
        user_id: uuid.UUID | str,
        email: str,
        role: UserRole | str,
        lifetime: timedelta,
    ) -> str:
        """Create a token with iat=now and exp=now+lifetime."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "role": UserRole(role).value,
            "iat": now,
            "exp": now + lifetime,
            # Keeps two tokens minted in the same second distinct.
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def issue_access_token(self, user_id: uuid.UUID | str, email: str, role: UserRole | str) -> str:
        return self.issue(user_id, email, role, self._access_token_lifetime)

    def issue_refresh_token(self, user_id: uuid.UUID | str, email: str, role: UserRole | str) -> str:
        return self.issue(user_id, email, role, self._refresh_token_lifetime)

    def verify(self, token: str) -> bool:
        """True iff the signature matches and exp is in the future. Never raises."""
        try:
            self._decode(token)
        except InvalidTokenError:
            return False
        return True

    def extract_subject(self, token: str) -> uuid.UUID:
        sub = self._claim(token, "sub")
        try:
            return uuid.UUID(sub)
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token subject", e) from e

    def extract_email(self, token: str) -> str:
        return self._claim(token, "email")

    def extract_role(self, token: str) -> UserRole:
        role = self._claim(token, "role")
        try:
            return UserRole(role)
        except ValueError as e:
            raise InvalidTokenError("Invalid token role", e) from e

    def _claim(self, token: str, name: str) -> str:
        value = self._decode(token).get(name)
        if not isinstance(value, str) or not value:
            raise InvalidTokenError(f"Token is missing claim '{name}'")
        return value

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError("Invalid or expired token", e) from e


def build_token_codec(settings: "Settings") -> TokenCodec:
    """Construct a TokenCodec from application settings."""
    return TokenCodec(
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        access_token_lifetime=settings.access_token_lifetime,
        refresh_token_lifetime=settings.refresh_token_lifetime,
    )


def build_password_hasher(settings: "Settings") -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
