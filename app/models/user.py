"""ORM model for application users (auth and RBAC)."""

import enum

from sqlalchemy import Column, DateTime, Enum, String, Uuid, func
from sqlalchemy.orm import relationship

from app.models.base import Base, IdentifiedById, new_id, utcnow


class UserRole(str, enum.Enum):
    """The two account roles. ADMIN uploads, deletes and manages users; VIEWER browses."""

    ADMIN = "ADMIN"
    VIEWER = "VIEWER"


class User(IdentifiedById, Base):
    """User account for JWT authentication and role-based access control."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(50), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", native_enum=False, length=16),
        nullable=False,
        default=UserRole.VIEWER,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, role={self.role!r})"
