"""
Tourlist Backend - Hotel Route Handlers
========================================

What:  /hotels list, detail, create, update, delete.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Identity, Operation
from app.database import get_db_session
from app.dependencies import require
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.hotel import (
    HotelCreate,
    HotelDetail,
    HotelListItem,
    HotelResponse,
    HotelUpdate,
)
from app.services.hotel_service import hotel_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hotels", tags=["Hotels"])

_NOT_FOUND = {404: {"description": "Hotel not found", "model": ErrorResponse}}
_MUTATION_ERRORS = {
    400: {"description": "Invalid hotel data", "model": ErrorResponse},
    401: {"description": "Not signed in as an admin", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[HotelListItem],
    summary="List hotels",
    description="Newest first, each with its destination and reviews.",
)
async def list_hotels(db: AsyncSession = Depends(get_db_session)) -> List[HotelListItem]:
    return await hotel_service.list_hotels(db)


@router.post(
    "",
    status_code=201,
    response_model=HotelResponse,
    responses=_MUTATION_ERRORS,
    summary="Create a hotel",
)
async def create_hotel(
    payload: HotelCreate,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> HotelResponse:
    return await hotel_service.create_hotel(db, payload)


@router.get("/{hotel_id}", response_model=HotelDetail, responses=_NOT_FOUND)
async def get_hotel(
    hotel_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> HotelDetail:
    return await hotel_service.get_hotel(db, hotel_id)


@router.put(
    "/{hotel_id}",
    response_model=HotelResponse,
    responses={**_MUTATION_ERRORS, **_NOT_FOUND},
    summary="Update a hotel",
    description="Partial update: only the fields present in the body change.",
)
async def update_hotel(
    hotel_id: UUID,
    payload: HotelUpdate,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> HotelResponse:
    return await hotel_service.update_hotel(db, hotel_id, payload)


@router.delete(
    "/{hotel_id}",
    response_model=MessageResponse,
    responses={**_MUTATION_ERRORS, **_NOT_FOUND},
)
async def delete_hotel(
    hotel_id: UUID,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await hotel_service.delete_hotel(db, hotel_id)
    return MessageResponse(message="Hotel deleted successfully")
