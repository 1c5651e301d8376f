"""
Tourlist Backend - Booking Route Handlers
==========================================

What:  The caller's own bookings plus booking CRUD behind checkout.

Routes:
    GET    /user/bookings     signed in     caller's bookings only
    GET    /bookings          admin         every booking
    POST   /bookings          signed in     owner = session subject, status PENDING
    GET    /bookings/{id}     owner/admin
    PUT    /bookings/{id}     admin
    DELETE /bookings/{id}     admin
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Identity, Operation
from app.database import get_db_session
from app.dependencies import require
from app.schemas.booking import (
    BookingCreate,
    BookingDetail,
    BookingResponse,
    BookingUpdate,
    UserBookingItem,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.booking_service import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bookings"])

_UNAUTHORIZED = {401: {"description": "Not signed in, or not allowed", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Booking not found", "model": ErrorResponse}}
_INVALID = {400: {"description": "Invalid booking", "model": ErrorResponse}}


@router.get(
    "/user/bookings",
    response_model=List[UserBookingItem],
    responses=_UNAUTHORIZED,
    summary="List the caller's bookings",
)
async def list_user_bookings(
    identity: Identity = Depends(require(Operation.READ_OWN_BOOKINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserBookingItem]:
    return await booking_service.list_for_user(db, identity)


@router.get(
    "/bookings",
    response_model=List[BookingDetail],
    responses=_UNAUTHORIZED,
    summary="List all bookings (admin)",
)
async def list_bookings(
    identity: Identity = Depends(require(Operation.MANAGE_BOOKINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> List[BookingDetail]:
    return await booking_service.list_all(db)


@router.post(
    "/bookings",
    status_code=201,
    response_model=BookingDetail,
    responses={**_INVALID, **_UNAUTHORIZED},
    summary="Book a hotel stay or an attraction visit",
)
async def create_booking(
    payload: BookingCreate,
    identity: Identity = Depends(require(Operation.CREATE_BOOKING)),
    db: AsyncSession = Depends(get_db_session),
) -> BookingDetail:
    """
    Create a booking for the signed-in user.

    `type` is HOTEL (hotelId, checkInDate, checkOutDate, numberOfGuests,
    numberOfRooms) or ATTRACTION (attractionId, date, numberOfPeople);
    totalPrice is required for both.
    """
    return await booking_service.create_booking(db, identity, payload)


@router.get(
    "/bookings/{booking_id}",
    response_model=BookingDetail,
    responses={**_UNAUTHORIZED, **_NOT_FOUND},
)
async def get_booking(
    booking_id: UUID,
    identity: Identity = Depends(require(Operation.READ_OWN_BOOKINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> BookingDetail:
    return await booking_service.get_booking(db, identity, booking_id)


@router.put(
    "/bookings/{booking_id}",
    response_model=BookingResponse,
    responses={**_INVALID, **_UNAUTHORIZED, **_NOT_FOUND},
)
async def update_booking(
    booking_id: UUID,
    payload: BookingUpdate,
    identity: Identity = Depends(require(Operation.MANAGE_BOOKINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> BookingResponse:
    return await booking_service.update_booking(db, booking_id, payload)


@router.delete(
    "/bookings/{booking_id}",
    response_model=MessageResponse,
    responses={**_UNAUTHORIZED, **_NOT_FOUND},
)
async def delete_booking(
    booking_id: UUID,
    identity: Identity = Depends(require(Operation.MANAGE_BOOKINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await booking_service.delete_booking(db, booking_id)
    return MessageResponse(message="Booking deleted successfully")
