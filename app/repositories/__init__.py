"""Persistence contracts over a SQLAlchemy session (no commits; callers own the transaction)."""

from app.repositories.refresh_tokens import RefreshTokenRepository
from app.repositories.users import UserRepository

__all__ = ["RefreshTokenRepository", "UserRepository"]
