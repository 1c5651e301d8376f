"""
Tourlist Backend - Attraction SQLAlchemy Model
===============================================

What:  ORM model for the `attractions` table.
Who:   Used by AttractionService; reviewed through `reviews.attraction_id`.

Defaults applied by the validators before insert:
    rating          → 0
    available_slots → max_visitors when not provided
    images          → []
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models._columns import (
    LOCATION_LENGTH,
    NAME_LENGTH,
    SHORT_TEXT_LENGTH,
    URL_LENGTH,
    JSONList,
    created_at_column,
    updated_at_column,
    uuid_pk,
)

if TYPE_CHECKING:
    from app.models.category import AttractionCategory
    from app.models.review import Review


class Attraction(Base):
    __tablename__ = "attractions"

    id: Mapped[uuid.UUID] = uuid_pk()

    name: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(LOCATION_LENGTH), nullable=True)

    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("attraction_categories.id", ondelete="RESTRICT"),
        nullable=True,
    )

    image_url: Mapped[Optional[str]] = mapped_column(String(URL_LENGTH), nullable=True)

    # List of media-service URLs
    images: Mapped[List[str]] = mapped_column(JSONList, nullable=False, default=list)

    rating: Mapped[float] = mapped_column(
        Float, nullable=False, default=0, server_default=text("0")
    )
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Free text, e.g. "2 hours"
    duration: Mapped[Optional[str]] = mapped_column(String(SHORT_TEXT_LENGTH), nullable=True)

    max_visitors: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    available_slots: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    category: Mapped[Optional["AttractionCategory"]] = relationship(
        back_populates="attractions"
    )
    reviews: Mapped[List["Review"]] = relationship(
        back_populates="attraction",
        order_by="Review.created_at.desc()",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_attractions_created_at", "created_at"),
        Index("idx_attractions_category_id", "category_id"),
    )

    def __repr__(self) -> str:
        return f"<Attraction(id={self.id}, name='{self.name}')>"
