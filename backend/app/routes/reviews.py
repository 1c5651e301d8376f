"""
Tourlist Backend - Review Route Handlers
=========================================

What:  The caller's own reviews plus review CRUD.

Routes:
    GET    /user/reviews      signed in     caller's reviews only
    GET    /reviews           admin         every review
    POST   /reviews           signed in     owner = session subject
    GET    /reviews/{id}      owner/admin
    PUT    /reviews/{id}      admin
    DELETE /reviews/{id}      admin
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
from app.schemas.review import (
    ReviewCreate,
    ReviewDetail,
    ReviewResponse,
    ReviewUpdate,
    UserReviewItem,
)
from app.services.review_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reviews"])

_UNAUTHORIZED = {401: {"description": "Not signed in, or not allowed", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Review not found", "model": ErrorResponse}}


@router.get(
    "/user/reviews",
    response_model=List[UserReviewItem],
    responses=_UNAUTHORIZED,
    summary="List the caller's reviews",
)
async def list_user_reviews(
    identity: Identity = Depends(require(Operation.READ_OWN_REVIEWS)),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserReviewItem]:
    """
    Reviews written by the signed-in user, newest first.

    The filter is the session subject; query parameters naming another
    user are ignored.
    """
    return await review_service.list_for_user(db, identity)


@router.get(
    "/reviews",
    response_model=List[ReviewDetail],
    responses=_UNAUTHORIZED,
    summary="List all reviews (admin)",
)
async def list_reviews(
    identity: Identity = Depends(require(Operation.MODERATE_REVIEWS)),
    db: AsyncSession = Depends(get_db_session),
) -> List[ReviewDetail]:
    return await review_service.list_all(db)


@router.post(
    "/reviews",
    status_code=201,
    response_model=ReviewResponse,
    responses={
        400: {"description": "Invalid review", "model": ErrorResponse},
        **_UNAUTHORIZED,
    },
    summary="Review a hotel or an attraction",
)
async def create_review(
    payload: ReviewCreate,
    identity: Identity = Depends(require(Operation.WRITE_REVIEW)),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewResponse:
    return await review_service.create_review(db, identity, payload)


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewDetail,
    responses={**_UNAUTHORIZED, **_NOT_FOUND},
)
async def get_review(
    review_id: UUID,
    identity: Identity = Depends(require(Operation.READ_OWN_REVIEWS)),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewDetail:
    return await review_service.get_review(db, identity, review_id)


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    responses={**_UNAUTHORIZED, **_NOT_FOUND},
)
async def update_review(
    review_id: UUID,
    payload: ReviewUpdate,
    identity: Identity = Depends(require(Operation.MODERATE_REVIEWS)),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewResponse:
    return await review_service.update_review(db, review_id, payload)


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    responses={**_UNAUTHORIZED, **_NOT_FOUND},
)
async def delete_review(
    review_id: UUID,
    identity: Identity = Depends(require(Operation.MODERATE_REVIEWS)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await review_service.delete_review(db, review_id)
    return MessageResponse(message="Review deleted successfully")
