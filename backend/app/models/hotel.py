"""
Tourlist Backend - Hotel SQLAlchemy Model
==========================================

What:  ORM model for the `hotels` table.
Who:   Used by HotelService; nested destination and reviews in listings.

Defaults applied by the validators before insert:
    rating          → 0
    available_rooms → 0
    amenities       → []
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
    from app.models.destination import Destination
    from app.models.review import Review


class Hotel(Base):
    __tablename__ = "hotels"

    id: Mapped[uuid.UUID] = uuid_pk()

    name: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(LOCATION_LENGTH), nullable=True)

    # Free-text class, e.g. "Boutique", "Resort"
    category: Mapped[Optional[str]] = mapped_column(String(SHORT_TEXT_LENGTH), nullable=True)

    image_url: Mapped[Optional[str]] = mapped_column(String(URL_LENGTH), nullable=True)
    images: Mapped[List[str]] = mapped_column(JSONList, nullable=False, default=list)

    rating: Mapped[float] = mapped_column(
        Float, nullable=False, default=0, server_default=text("0")
    )
    price_per_night: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    amenities: Mapped[List[str]] = mapped_column(JSONList, nullable=False, default=list)
    available_rooms: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    destination_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("destinations.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    destination: Mapped[Optional["Destination"]] = relationship(back_populates="hotels")
    reviews: Mapped[List["Review"]] = relationship(
        back_populates="hotel",
        order_by="Review.created_at.desc()",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_hotels_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name='{self.name}')>"
