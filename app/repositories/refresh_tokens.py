"""Session store: refresh token rows, looked up and deleted by token string or owner."""

import uuid
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models.refresh_token import RefreshToken


class RefreshTokenRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_token(self, token: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return self.session.scalars(stmt).first()

    def list_by_user_id(self, user_id: uuid.UUID) -> list[RefreshToken]:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.created_at)
        )
        return list(self.session.scalars(stmt))

    def save(self, refresh_token: RefreshToken) -> RefreshToken:
        self.session.add(refresh_token)
        self.session.flush()
        return refresh_token

    def delete(self, refresh_token: RefreshToken) -> int:
        """
        Delete one row by id and return how many rows went away (0 or 1).

        Issued as a bulk DELETE rather than session.delete() so a concurrent
        request that already removed the row is observable as 0.
        """
        return self._delete_where(RefreshToken.id == refresh_token.id)

    def delete_by_token(self, token: str) -> int:
        return self._delete_where(RefreshToken.token == token)

    def delete_all_by_user_id(self, user_id: uuid.UUID) -> int:
        return self._delete_where(RefreshToken.user_id == user_id)

    def delete_expired(self, now: datetime) -> int:
        # Stored datetimes may come back naive, so skip in-session evaluation.
        return self._delete_where(RefreshToken.expires_at < now, synchronize_session=False)

    def _delete_where(self, criterion, synchronize_session: str | bool = "evaluate") -> int:
        result = self.session.execute(
            delete(RefreshToken)
            .where(criterion)
            .execution_options(synchronize_session=synchronize_session)
        )
        return result.rowcount or 0
