"""
Tourlist Backend - Attraction Category Route Handlers
======================================================

What:  /attraction-categories list, detail, create, update, delete.
How:   Reads are public; every mutation resolves the caller through
       require(Operation.MANAGE_LISTINGS) before the body is looked at.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Identity, Operation
from app.database import get_db_session
from app.dependencies import require
from app.schemas.category import (
    CategoryCreate,
    CategoryDetail,
    CategoryListItem,
    CategoryResponse,
    CategoryUpdate,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.category_service import category_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attraction-categories", tags=["Categories"])

_MUTATION_ERRORS = {
    400: {"description": "Missing or duplicate name", "model": ErrorResponse},
    401: {"description": "Not signed in as an admin", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[CategoryListItem],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List attraction categories",
    description="All categories ordered by name, each with its attraction count.",
)
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
) -> List[CategoryListItem]:
    return await category_service.list_categories(db)


@router.post(
    "",
    status_code=201,
    response_model=CategoryResponse,
    responses=_MUTATION_ERRORS,
    summary="Create an attraction category",
)
async def create_category(
    payload: CategoryCreate,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    """
    Create a category.

    Example:
        POST {"name": "  Beach "} → 201 {"name": "Beach", "description": null, ...}
        POST {"name": "Beach"}    → 400 {"error": "A category with this name already exists"}
    """
    return await category_service.create_category(db, payload)


@router.get(
    "/{category_id}",
    response_model=CategoryDetail,
    responses={
        404: {"description": "Category not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a category with its attractions",
)
async def get_category(
    category_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryDetail:
    return await category_service.get_category(db, category_id)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={**_MUTATION_ERRORS, 404: {"description": "Category not found", "model": ErrorResponse}},
    summary="Update an attraction category",
)
async def update_category(
    category_id: UUID,
    payload: CategoryUpdate,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    return await category_service.update_category(db, category_id, payload)


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Category still has attractions", "model": ErrorResponse},
        401: {"description": "Not signed in as an admin", "model": ErrorResponse},
        404: {"description": "Category not found", "model": ErrorResponse},
    },
    summary="Delete an attraction category",
)
async def delete_category(
    category_id: UUID,
    identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await category_service.delete_category(db, category_id)
    return MessageResponse(message="Category deleted successfully")
