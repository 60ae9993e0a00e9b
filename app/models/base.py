"""SQLAlchemy declarative Base and shared model configuration."""

import os
import threading
import time
import uuid
from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


_id_lock = threading.Lock()
_last_id = 0


def new_id() -> uuid.UUID:
    """
    Return a time-ordered, unguessable UUID (version 7 layout).

    48 bits of millisecond timestamp followed by 74 random bits, so ids sort by
    creation time without exposing a sequence. Within one process ids are
    strictly increasing, even inside the same millisecond.
    """
    global _last_id
    unix_ms = time.time_ns() // 1_000_000
    rand = int.from_bytes(os.urandom(10), "big")
    value = (unix_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= 0x7 << 76
    value |= ((rand >> 62) & 0xFFF) << 64
    value |= 0b10 << 62
    value |= rand & 0x3FFF_FFFF_FFFF_FFFF
    with _id_lock:
        if value <= _last_id:
            value = _last_id + 1
        _last_id = value
    return uuid.UUID(int=value)


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class IdentifiedById:
    """
    Mixin: two entities are equal iff they are the same type with the same id.

    Ids are assigned at construction so the hash never changes once the
    entity is placed in a set or dict.
    """

    def __init__(self, **kwargs: object) -> None:
        kwargs.setdefault("id", new_id())
        super().__init__(**kwargs)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))
