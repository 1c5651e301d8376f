"""
Tourlist Backend - Attraction Route Handlers
=============================================

What:  /attractions list, detail, create, update, delete.
How:   Public reads; admin-only mutations (MANAGE_LISTINGS).
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Identity, Operation
from app.database import get_db_session
from app.dependencies import require
from app.schemas.attraction import (
    AttractionCreate,
    AttractionDetail,
    AttractionListItem,
    AttractionResponse,
    AttractionUpdate,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.attraction_service import attraction_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attractions", tags=["Attractions"])

_NOT_FOUND = {404: {"description": "Attraction not found", "model": ErrorResponse}}
_MUTATION_ERRORS = {
    400: {"description": "Invalid attraction data", "model": ErrorResponse},
    401: {"description": "Not signed in as an admin", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[AttractionListItem],
    summary="List attractions",
    description="Newest first, each with its category and reviews.",
)
async def list_attractions(
    db: AsyncSession = Depends(get_db_session),
) -> List[AttractionListItem]:
    return await attraction_service.list_attractions(db)


@router.post(
    "",
    status_code=201,
    response_model=AttractionResponse,
    responses=_MUTATION_ERRORS,
    summary="Create an attraction",
)
async def create_attraction(
    payload: AttractionCreate,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> AttractionResponse:
    """
    Create an attraction.

    Example:
        POST {"name": "Kakum", "maxVisitors": 50}
        → 201 {"name": "Kakum", "maxVisitors": 50, "availableSlots": 50, "rating": 0, ...}
    """
    return await attraction_service.create_attraction(db, payload)


@router.get(
    "/{attraction_id}",
    response_model=AttractionDetail,
    responses=_NOT_FOUND,
    summary="Get an attraction",
)
async def get_attraction(
    attraction_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> AttractionDetail:
    return await attraction_service.get_attraction(db, attraction_id)


@router.put(
    "/{attraction_id}",
    response_model=AttractionResponse,
    responses={**_MUTATION_ERRORS, **_NOT_FOUND},
    summary="Update an attraction",
    description="Partial update: only the fields present in the body change.",
)
async def update_attraction(
    attraction_id: UUID,
    payload: AttractionUpdate,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> AttractionResponse:
    return await attraction_service.update_attraction(db, attraction_id, payload)


@router.delete(
    "/{attraction_id}",
    response_model=MessageResponse,
    responses={**_MUTATION_ERRORS, **_NOT_FOUND},
    summary="Delete an attraction",
)
async def delete_attraction(
    attraction_id: UUID,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await attraction_service.delete_attraction(db, attraction_id)
    return MessageResponse(message="Attraction deleted successfully")
