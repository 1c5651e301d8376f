"""
Tourlist Backend - Hotel Service
=================================

What:  Business logic for hotels: list, detail, create, update, delete.
Who:   Called by the /hotels route handlers.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import NotFoundError, StorageError, TourlistError, ValidationError
from app.models import Destination, Hotel, Review
from app.models._columns import utcnow
from app.schemas.hotel import (
    HotelCreate,
    HotelDetail,
    HotelListItem,
    HotelResponse,
    HotelUpdate,
)
from app.services.validation import normalize_hotel

logger = logging.getLogger(__name__)


class HotelService:
    """Stateless service for hotel operations."""

    async def _check_destination(
        self, db: AsyncSession, destination_id: Optional[uuid.UUID]
    ) -> None:
        if destination_id is None:
            return
        if await db.get(Destination, destination_id) is None:
            raise ValidationError(message="Invalid destination", field="destinationId")

    async def _get_or_404(self, db: AsyncSession, hotel_id: uuid.UUID) -> Hotel:
        hotel = await db.get(Hotel, hotel_id)
        if hotel is None:
            raise NotFoundError(resource="hotel", resource_id=str(hotel_id))
        return hotel

    async def list_hotels(self, db: AsyncSession) -> List[HotelListItem]:
        """Every hotel newest first, with its destination and reviews."""
        try:
            result = await db.execute(
                select(Hotel)
                .options(
                    selectinload(Hotel.destination),
                    selectinload(Hotel.reviews),
                )
                .order_by(Hotel.created_at.desc())
            )
            return [HotelListItem.model_validate(h) for h in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing hotels: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to fetch hotels. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_hotel(self, db: AsyncSession, hotel_id: uuid.UUID) -> HotelDetail:
        try:
            result = await db.execute(
                select(Hotel)
                .where(Hotel.id == hotel_id)
                .options(
                    selectinload(Hotel.destination),
                    selectinload(Hotel.reviews).selectinload(Review.user),
                )
            )
            hotel = result.scalar_one_or_none()
            if hotel is None:
                raise NotFoundError(resource="hotel", resource_id=str(hotel_id))
            return HotelDetail.model_validate(hotel)
        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error fetching hotel %s: %s", hotel_id, str(e))
            raise StorageError(
                message="Failed to fetch hotel. Please try again.",
                context={"hotel_id": str(hotel_id)},
            )

    async def create_hotel(self, db: AsyncSession, payload: HotelCreate) -> HotelResponse:
        """
        Create a hotel.

        Defaults: rating 0, availableRooms 0, images [], amenities [].

        Raises:
            ValidationError: missing name, bad numbers, unknown destination
            StorageError: unexpected store failure
        """
        data = normalize_hotel(payload)

        try:
            await self._check_destination(db, data.get("destination_id"))

            hotel = Hotel(**data)
            db.add(hotel)
            await db.flush()
            logger.info("Hotel created: %s (%s)", hotel.id, hotel.name)
            return HotelResponse.model_validate(hotel)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error creating hotel: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to create hotel. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_hotel(
        self,
        db: AsyncSession,
        hotel_id: uuid.UUID,
        payload: HotelUpdate,
    ) -> HotelResponse:
        data = normalize_hotel(payload, partial=True)

        try:
            hotel = await self._get_or_404(db, hotel_id)
            if "destination_id" in data:
                await self._check_destination(db, data["destination_id"])

            for key, value in data.items():
                setattr(hotel, key, value)
            hotel.updated_at = utcnow()
            await db.flush()
            return HotelResponse.model_validate(hotel)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error updating hotel %s: %s", hotel_id, str(e))
            raise StorageError(
                message="Failed to update hotel. Please try again.",
                context={"hotel_id": str(hotel_id)},
            )

    async def delete_hotel(self, db: AsyncSession, hotel_id: uuid.UUID) -> None:
        try:
            hotel = await self._get_or_404(db, hotel_id)
            await db.delete(hotel)
            await db.flush()
            logger.info("Hotel deleted: %s", hotel_id)
        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error deleting hotel %s: %s", hotel_id, str(e))
            raise StorageError(
                message="Failed to delete hotel. Please try again.",
                context={"hotel_id": str(hotel_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
hotel_service = HotelService()
