"""
Tourlist Backend - Booking SQLAlchemy Model
============================================

What:  ORM model for the `bookings` table.
Who:   Used by BookingService (checkout flow and admin booking management).

Constraints:
    - user_id: owner; always the session subject at creation time
    - type HOTEL carries hotel_id (and stay dates), type ATTRACTION carries
      attraction_id (and a visit date); the other target is NULL
      (ck_bookings_type_target, enforced by the database)
    - status is one of PENDING / CONFIRMED / CANCELLED / COMPLETED;
      new bookings start as PENDING
"""

import enum
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Date, Float, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models._columns import created_at_column, updated_at_column, uuid_pk

if TYPE_CHECKING:
    from app.models.attraction import Attraction
    from app.models.hotel import Hotel
    from app.models.user import User


class BookingType(str, enum.Enum):
    HOTEL = "HOTEL"
    ATTRACTION = "ATTRACTION"


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = uuid_pk()

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Values: 'HOTEL' | 'ATTRACTION'
    type: Mapped[str] = mapped_column(String(20), nullable=False)

    hotel_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=True,
    )
    attraction_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("attractions.id", ondelete="CASCADE"),
        nullable=True,
    )

    # Hotel stays
    check_in: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    check_out: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    guests: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Attraction visits
    visit_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    number_of_people: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    total_price: Mapped[float] = mapped_column(Float, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING.value,
        server_default=text("'PENDING'"),
    )

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    user: Mapped["User"] = relationship(back_populates="bookings")
    hotel: Mapped[Optional["Hotel"]] = relationship()
    attraction: Mapped[Optional["Attraction"]] = relationship()

    __table_args__ = (
        CheckConstraint(
            "(type = 'HOTEL' AND hotel_id IS NOT NULL AND attraction_id IS NULL) OR "
            "(type = 'ATTRACTION' AND attraction_id IS NOT NULL AND hotel_id IS NULL)",
            name="ck_bookings_type_target",
        ),
        CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'CANCELLED', 'COMPLETED')",
            name="ck_bookings_status",
        ),
        Index("idx_bookings_user_id_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, type='{self.type}', status='{self.status}')>"
