"""
Tourlist Backend - Review SQLAlchemy Model
===========================================

What:  ORM model for the `reviews` table.
Who:   Used by ReviewService; nested into attraction and hotel listings.

Constraints:
    - user_id: owner; the only column user-scoped reads filter on
    - exactly one of hotel_id / attraction_id is set
      (ck_reviews_single_target, enforced by the database)
    - rating between 1 and 5
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models._columns import created_at_column, updated_at_column, uuid_pk

if TYPE_CHECKING:
    from app.models.attraction import Attraction
    from app.models.hotel import Hotel
    from app.models.user import User


class Review(Base):
    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = uuid_pk()

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    hotel_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=True,
    )
    attraction_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("attractions.id", ondelete="CASCADE"),
        nullable=True,
    )

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    user: Mapped["User"] = relationship(back_populates="reviews")
    hotel: Mapped[Optional["Hotel"]] = relationship(back_populates="reviews")
    attraction: Mapped[Optional["Attraction"]] = relationship(back_populates="reviews")

    __table_args__ = (
        CheckConstraint(
            "(hotel_id IS NULL) <> (attraction_id IS NULL)",
            name="ck_reviews_single_target",
        ),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
        Index("idx_reviews_user_id_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, user_id={self.user_id}, rating={self.rating})>"
