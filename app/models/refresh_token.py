"""ORM model for persisted refresh tokens (one row per active session)."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid, func
from sqlalchemy.orm import relationship

from app.models.base import Base, IdentifiedById, as_utc, new_id, utcnow


class RefreshToken(IdentifiedById, Base):
    """
    A refresh token issued to a user.

    A row is valid while now < expires_at. Rows are deleted on logout, on
    rotation, and by the expired-token sweep; a user may hold several rows
    (one per device).
    """

    __tablename__ = "refresh_tokens"

    id = Column(Uuid, primary_key=True, default=new_id)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token = Column(Text, nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    user = relationship("User", back_populates="refresh_tokens")

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= as_utc(self.expires_at)

    def __repr__(self) -> str:
        return f"RefreshToken(id={self.id!r}, user_id={self.user_id!r}, expires_at={self.expires_at!r})"
