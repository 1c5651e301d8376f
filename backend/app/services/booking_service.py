"""
Tourlist Backend - Booking Service
===================================

What:  Business logic for bookings: the caller's own bookings, create from
       the checkout flow, single lookup, admin list / update / delete.
Who:   Called by the /bookings and /user/bookings route handlers.

Ownership:
    The owner of a booking is always the session subject. list_for_user()
    filters on identity.subject_id and get_booking() runs the
    READ_OWN_BOOKINGS gate against the stored owner.

Payment is handled outside this service; bookings are created PENDING and
moved along by an admin.
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.auth import Identity, Operation, enforce
from app.exceptions import (
    NotFoundError,
    StorageError,
    TourlistError,
    UnauthenticatedError,
    ValidationError,
)
from app.models import Attraction, Booking, Hotel, User
from app.models._columns import utcnow
from app.schemas.booking import (
    BookingCreate,
    BookingDetail,
    BookingResponse,
    BookingUpdate,
    UserBookingItem,
)
from app.services.validation import normalize_booking, normalize_booking_update

logger = logging.getLogger(__name__)

_DETAIL_OPTIONS = (
    selectinload(Booking.user),
    selectinload(Booking.hotel),
    selectinload(Booking.attraction),
)


class BookingService:
    """Stateless service for booking operations."""

    async def list_for_user(
        self, db: AsyncSession, identity: Identity
    ) -> List[UserBookingItem]:
        """Bookings made by the caller, newest first."""
        try:
            result = await db.execute(
                select(Booking)
                .where(Booking.user_id == identity.subject_id)
                .options(selectinload(Booking.hotel), selectinload(Booking.attraction))
                .order_by(Booking.created_at.desc())
            )
            return [UserBookingItem.model_validate(b) for b in result.scalars().all()]
        except Exception as e:
            logger.error(
                "Database error listing bookings for %s: %s",
                identity.subject_id,
                str(e),
                exc_info=True,
            )
            raise StorageError(
                message="Failed to fetch bookings. Please try again.",
                context={"user_id": str(identity.subject_id)},
            )

    async def list_all(self, db: AsyncSession) -> List[BookingDetail]:
        try:
            result = await db.execute(
                select(Booking).options(*_DETAIL_OPTIONS).order_by(Booking.created_at.desc())
            )
            return [BookingDetail.model_validate(b) for b in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing bookings: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to fetch bookings. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_booking(
        self, db: AsyncSession, identity: Identity, booking_id: uuid.UUID
    ) -> BookingDetail:
        """
        One booking, visible to its owner and to admins.

        Raises:
            NotFoundError: unknown id
            ForbiddenError: caller is neither the owner nor an admin
        """
        try:
            result = await db.execute(
                select(Booking).where(Booking.id == booking_id).options(*_DETAIL_OPTIONS)
            )
            booking = result.scalar_one_or_none()
            if booking is None:
                raise NotFoundError(resource="booking", resource_id=str(booking_id))

            enforce(identity, Operation.READ_OWN_BOOKINGS, owner_id=booking.user_id)
            return BookingDetail.model_validate(booking)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error fetching booking %s: %s", booking_id, str(e))
            raise StorageError(
                message="Failed to fetch booking. Please try again.",
                context={"booking_id": str(booking_id)},
            )

    async def create_booking(
        self, db: AsyncSession, identity: Identity, payload: BookingCreate
    ) -> BookingDetail:
        """
        Create a PENDING booking owned by the caller.

        Raises:
            ValidationError: bad type, missing field, unknown hotel/attraction
            UnauthenticatedError: the session subject no longer exists
        """
        data = normalize_booking(payload)

        try:
            if await db.get(User, identity.subject_id) is None:
                raise UnauthenticatedError(
                    context={"reason": "unknown_subject", "user_id": str(identity.subject_id)}
                )

            if data["hotel_id"] is not None:
                if await db.get(Hotel, data["hotel_id"]) is None:
                    raise ValidationError(message="Invalid hotel", field="hotelId")
            elif await db.get(Attraction, data["attraction_id"]) is None:
                raise ValidationError(message="Invalid attraction", field="attractionId")

            booking = Booking(user_id=identity.subject_id, **data)
            db.add(booking)
            await db.flush()
            result = await db.execute(
                select(Booking)
                .where(Booking.id == booking.id)
                .options(*_DETAIL_OPTIONS)
                .execution_options(populate_existing=True)
            )
            booking = result.scalar_one()
            logger.info(
                "Booking created: %s (%s) by %s", booking.id, booking.type, identity.subject_id
            )
            return BookingDetail.model_validate(booking)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error creating booking: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to create booking. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_booking(
        self, db: AsyncSession, booking_id: uuid.UUID, payload: BookingUpdate
    ) -> BookingResponse:
        try:
            booking = await db.get(Booking, booking_id)
            if booking is None:
                raise NotFoundError(resource="booking", resource_id=str(booking_id))

            data = normalize_booking_update(payload, existing=booking)
            for key, value in data.items():
                setattr(booking, key, value)
            booking.updated_at = utcnow()
            await db.flush()
            if "status" in data:
                logger.info("Booking %s status → %s", booking_id, booking.status)
            return BookingResponse.model_validate(booking)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error updating booking %s: %s", booking_id, str(e))
            raise StorageError(
                message="Failed to update booking. Please try again.",
                context={"booking_id": str(booking_id)},
            )

    async def delete_booking(self, db: AsyncSession, booking_id: uuid.UUID) -> None:
        try:
            booking = await db.get(Booking, booking_id)
            if booking is None:
                raise NotFoundError(resource="booking", resource_id=str(booking_id))
            await db.delete(booking)
            await db.flush()
            logger.info("Booking deleted: %s", booking_id)
        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error deleting booking %s: %s", booking_id, str(e))
            raise StorageError(
                message="Failed to delete booking. Please try again.",
                context={"booking_id": str(booking_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
booking_service = BookingService()
