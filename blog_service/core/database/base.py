"""Base database model classes with composable mixins.

This module provides the foundation for SQLAlchemy models:
- UUID v7 primary keys (time-sortable, totally ordered)
- Timestamp tracking (created_at, updated_at)
- Consistent constraint naming

Example:
    class Category(UUIDTimestampedBase):
        __tablename__ = "categories"
        name: Mapped[str] = mapped_column(String(100), unique=True)
"""

from __future__ import annotations

import os
import time
import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

# Consistent naming convention for database constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base with consistent constraint naming."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def generate_uuid7() -> uuid.UUID:
    """Generate a UUID v7 (time-sortable).

    UUID v7 encodes the Unix timestamp in milliseconds in the first 48 bits,
    so later IDs sort after earlier ones. IDs generated within the same
    millisecond are ordered by their random bits, which still gives a total
    order.

    Example:
        >>> id1 = generate_uuid7()
        >>> time.sleep(0.002)
        >>> id2 = generate_uuid7()
        >>> id1 < id2
        True
    """
    timestamp_ms = int(time.time() * 1000)
    random_bytes = os.urandom(10)

    # RFC 9562 layout: 48-bit timestamp, version 7, variant 10
    uuid_bytes = bytearray(16)
    uuid_bytes[0:6] = timestamp_ms.to_bytes(6, byteorder="big")
    uuid_bytes[6] = (random_bytes[0] & 0x0F) | 0x70
    uuid_bytes[7] = random_bytes[1]
    uuid_bytes[8] = (random_bytes[2] & 0x3F) | 0x80
    uuid_bytes[9:16] = random_bytes[3:10]

    return uuid.UUID(bytes=bytes(uuid_bytes))


class UUIDv7PKMixin:
    """UUID v7 primary key (time-sortable).

    Provides:
        id: UUID v7 primary key (time-ordered)
    """

    __allow_unmapped__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=generate_uuid7,
        comment="UUID v7 primary key (time-sortable)",
    )


class TimestampMixin:
    """Timestamp tracking for create and update operations.

    Uses both Python-side defaults (for test environments) and database
    server defaults (for direct SQL inserts).

    Provides:
        created_at: Timestamp of record creation (immutable)
        updated_at: Timestamp of last modification (auto-updates)
    """

    __allow_unmapped__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
        index=True,
        comment="Timestamp of record creation",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
        comment="Timestamp of last update",
    )


class UUIDTimestampedBase(Base, UUIDv7PKMixin, TimestampMixin):
    """Convenience base with UUID v7 PK and timestamps.

    Example:
        class Post(UUIDTimestampedBase):
            __tablename__ = "posts"
            title: Mapped[str] = mapped_column(String(255))
    """

    __abstract__ = True
