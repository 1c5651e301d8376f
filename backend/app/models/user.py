"""
Tourlist Backend - User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table.
Who:   Referenced by reviews and bookings (owner), and by their services
       when checking that a session subject still exists.

Accounts are created by the external identity provider; this service only
reads them. The `role` column mirrors the role claim carried in session tokens.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models._columns import created_at_column, uuid_pk

if TYPE_CHECKING:
    from app.models.booking import Booking
    from app.models.review import Review


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = uuid_pk()

    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        comment="Login email, unique across users",
    )

    # Values: 'user' | 'admin'
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="user",
        server_default=text("'user'"),
    )

    created_at: Mapped[datetime] = created_at_column()

    reviews: Mapped[List["Review"]] = relationship(
        back_populates="user", passive_deletes=True
    )
    bookings: Mapped[List["Booking"]] = relationship(
        back_populates="user", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
