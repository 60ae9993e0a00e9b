"""Credential store: lookups and writes for User rows."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.user import User


class UserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: uuid.UUID) -> User | None:
        return self.session.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        return self.session.scalars(select(User).where(User.email == email)).first()

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email).limit(1)
        return self.session.scalars(stmt).first() is not None

    def save(self, user: User) -> User:
        """Add (or re-attach) the user and flush so defaults and constraints apply now."""
        self.session.add(user)
        self.session.flush()
        return user

    def count_all(self) -> int:
        return self.session.scalar(select(func.count()).select_from(User)) or 0

    def list_all(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.id)))
