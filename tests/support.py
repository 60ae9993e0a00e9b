"""Shared helpers for tests: in-memory SQLite sessions, a fast hasher and a test codec."""

from datetime import timedelta

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import PasswordHasher, TokenCodec
from app.models import Base

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"
# bcrypt's minimum cost keeps the suite fast.
TEST_BCRYPT_ROUNDS = 4


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with all tables; one shared connection."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def make_codec(
    secret: str = TEST_SECRET,
    access_minutes: int = 15,
    refresh_days: int = 7,
) -> TokenCodec:
    return TokenCodec(
        secret,
        access_token_lifetime=timedelta(minutes=access_minutes),
        refresh_token_lifetime=timedelta(days=refresh_days),
    )


def make_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)
