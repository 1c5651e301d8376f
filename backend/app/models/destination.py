"""
Tourlist Backend - Destination SQLAlchemy Model
================================================

What:  ORM model for the `destinations` table (a city or region hotels belong to).
Who:   Nested into hotel listings; referenced by hotels.destination_id.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models._columns import (
    LOCATION_LENGTH,
    NAME_LENGTH,
    URL_LENGTH,
    created_at_column,
    uuid_pk,
)

if TYPE_CHECKING:
    from app.models.hotel import Hotel


class Destination(Base):
    __tablename__ = "destinations"

    id: Mapped[uuid.UUID] = uuid_pk()
    name: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(LOCATION_LENGTH), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(URL_LENGTH), nullable=True)
    created_at: Mapped[datetime] = created_at_column()

    hotels: Mapped[List["Hotel"]] = relationship(back_populates="destination")

    def __repr__(self) -> str:
        return f"<Destination(id={self.id}, name='{self.name}')>"
