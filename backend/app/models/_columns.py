"""
Tourlist Backend - Shared Column Helpers
=========================================

What:  Column factories reused by every table (UUID primary key, UTC timestamps).
How:   Python-side defaults so values are populated on flush for every
       backend (PostgreSQL and SQLite), with server defaults for rows
       inserted outside the ORM.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def uuid_pk() -> Mapped[uuid.UUID]:
    return mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )


def created_at_column() -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this row was created (UTC)",
    )


def updated_at_column() -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this row was last modified (UTC)",
    )


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONList = JSON().with_variant(JSONB(), "postgresql")


# Column lengths, shared with the mutation validators
NAME_LENGTH = 200
CATEGORY_NAME_LENGTH = 100
SHORT_TEXT_LENGTH = 100
COLOR_LENGTH = 32
LOCATION_LENGTH = 300
URL_LENGTH = 1000
