"""
Tourlist Backend - Attraction Category SQLAlchemy Model
========================================================

What:  ORM model for the `attraction_categories` table.
Who:   Used by CategoryService for CRUD; attractions reference it.

Table Design:
    - name: UNIQUE at the database level. The service pre-checks for
      duplicates, but only this constraint holds under concurrent inserts.
      Comparison is case-sensitive ("Beach" and "beach" are distinct).
    - description / color: NULL when not provided (never empty strings).
    - attraction count is derived with a COUNT query, not stored.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models._columns import (
    CATEGORY_NAME_LENGTH,
    COLOR_LENGTH,
    created_at_column,
    updated_at_column,
    uuid_pk,
)

if TYPE_CHECKING:
    from app.models.attraction import Attraction


class AttractionCategory(Base):
    """
    A grouping of attractions (Historic, Natural, Beach, ...).

    Lifecycle:
        1. Created by an admin after the name is trimmed and checked for uniqueness
        2. Renamed / recolored by an admin (same uniqueness rule, excluding itself)
        3. Deleted only while no attraction references it
    """

    __tablename__ = "attraction_categories"

    id: Mapped[uuid.UUID] = uuid_pk()

    name: Mapped[str] = mapped_column(
        String(CATEGORY_NAME_LENGTH),
        nullable=False,
        comment="Display name, trimmed, unique (case-sensitive)",
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Hex color used by the front-end badge, e.g. '#00CED1'
    color: Mapped[Optional[str]] = mapped_column(String(COLOR_LENGTH), nullable=True)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    attractions: Mapped[List["Attraction"]] = relationship(back_populates="category")

    __table_args__ = (
        UniqueConstraint("name", name="uq_attraction_categories_name"),
    )

    def __repr__(self) -> str:
        return f"<AttractionCategory(id={self.id}, name='{self.name}')>"
