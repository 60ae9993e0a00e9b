"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.refresh_token import RefreshToken
from app.models.user import User, UserRole

__all__ = ["Base", "RefreshToken", "User", "UserRole"]
