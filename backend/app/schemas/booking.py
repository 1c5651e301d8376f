"""
Tourlist Backend - Booking Schemas
===================================

What:  Booking request bodies and response shapes.

Create body keys follow the checkout form: `checkInDate`, `checkOutDate`,
`numberOfGuests`, `numberOfRooms` for hotel stays, `date` and
`numberOfPeople` for attraction visits. Responses use the stored column
names (`checkIn`, `checkOut`, `guests`, `rooms`, `visitDate`, ...).
"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import ApiModel
from app.schemas.review import ListingSummary, UserSummary


# ── Requests ──────────────────────────────────────────────────────────────

class BookingCreate(ApiModel):
    """A HOTEL or ATTRACTION booking; the owner comes from the session."""

    type: Optional[str] = None
    hotel_id: Optional[uuid.UUID] = None
    attraction_id: Optional[uuid.UUID] = None

    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    number_of_guests: Optional[int] = None
    number_of_rooms: Optional[int] = None

    visit_date: Optional[date] = Field(default=None, alias="date")
    number_of_people: Optional[int] = None

    total_price: Optional[float] = None


class BookingUpdate(ApiModel):
    """Admin update: only keys present in the body are applied."""

    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: Optional[int] = None
    rooms: Optional[int] = None
    visit_date: Optional[date] = None
    number_of_people: Optional[int] = None
    total_price: Optional[float] = None
    status: Optional[str] = None


# ── Responses ─────────────────────────────────────────────────────────────

class BookingResponse(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    type: str
    hotel_id: Optional[uuid.UUID] = None
    attraction_id: Optional[uuid.UUID] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: Optional[int] = None
    rooms: Optional[int] = None
    visit_date: Optional[date] = None
    number_of_people: Optional[int] = None
    total_price: float
    status: str
    created_at: datetime
    updated_at: datetime


class UserBookingItem(BookingResponse):
    """Entry of GET /user/bookings."""

    hotel: Optional[ListingSummary] = None
    attraction: Optional[ListingSummary] = None


class BookingDetail(UserBookingItem):
    """Full booking, as returned to admins and to the booking owner."""

    user: UserSummary
