"""User account service: profile, password change and admin role management."""

import logging
import uuid

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import InvalidRequestError, NotFoundError
from app.core.security import PasswordHasher
from app.models.user import User, UserRole
from app.repositories.users import UserRepository
from app.schemas.auth import UserResponse

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, password_hasher: PasswordHasher) -> None:
        self.db = db
        self.password_hasher = password_hasher
        self.users = UserRepository(db)

    def _get_or_raise(self, user_id: uuid.UUID) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_user(self, user_id: uuid.UUID) -> UserResponse:
        return UserResponse.model_validate(self._get_or_raise(user_id))

    def get_user_by_email(self, email: str) -> UserResponse:
        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError("User", email)
        return UserResponse.model_validate(user)

    def list_users(self) -> list[UserResponse]:
        return [UserResponse.model_validate(u) for u in self.users.list_all()]

    def update_profile(self, user_id: uuid.UUID, name: str) -> UserResponse:
        with transaction(self.db):
            user = self._get_or_raise(user_id)
            user.name = name
            self.users.save(user)
        return UserResponse.model_validate(user)

    def change_password(
        self, user_id: uuid.UUID, current_password: str, new_password: str
    ) -> None:
        """Replace the password hash after checking the current password. Sessions are kept."""
        with transaction(self.db):
            user = self._get_or_raise(user_id)
            if not self.password_hasher.matches(current_password, user.password_hash):
                raise InvalidRequestError("Current password is incorrect")
            user.password_hash = self.password_hasher.hash(new_password)
            self.users.save(user)
        logger.info("Password changed", extra={"user_id": str(user_id)})

    def update_role(self, user_id: uuid.UUID, role: UserRole) -> UserResponse:
        with transaction(self.db):
            user = self._get_or_raise(user_id)
            user.role = role
            self.users.save(user)
        logger.info("Role changed", extra={"user_id": str(user_id), "role": role.value})
        return UserResponse.model_validate(user)
