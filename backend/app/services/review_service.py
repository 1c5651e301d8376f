"""
Tourlist Backend - Review Service
==================================

What:  Business logic for reviews: the caller's own reviews, admin
       moderation (list all / update / delete), create, single lookup.
Who:   Called by the /reviews and /user/reviews route handlers.

Ownership:
    The owner of a review is always the session subject. Client-supplied
    user ids are never read; list_for_user() filters on identity.subject_id
    and get_review() runs the READ_OWN_REVIEWS gate against the stored owner.
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
from app.models import Attraction, Hotel, Review, User
from app.models._columns import utcnow
from app.schemas.review import (
    ReviewCreate,
    ReviewDetail,
    ReviewResponse,
    ReviewUpdate,
    UserReviewItem,
)
from app.services.validation import normalize_review, normalize_review_update

logger = logging.getLogger(__name__)

_DETAIL_OPTIONS = (
    selectinload(Review.user),
    selectinload(Review.hotel),
    selectinload(Review.attraction),
)


class ReviewService:
    """Stateless service for review operations."""

    async def list_for_user(
        self, db: AsyncSession, identity: Identity
    ) -> List[UserReviewItem]:
        """
        Reviews written by the caller, newest first, with the reviewed
        hotel or attraction summarized.
        """
        try:
            result = await db.execute(
                select(Review)
                .where(Review.user_id == identity.subject_id)
                .options(selectinload(Review.hotel), selectinload(Review.attraction))
                .order_by(Review.created_at.desc())
            )
            return [UserReviewItem.model_validate(r) for r in result.scalars().all()]
        except Exception as e:
            logger.error(
                "Database error listing reviews for %s: %s",
                identity.subject_id,
                str(e),
                exc_info=True,
            )
            raise StorageError(
                message="Failed to fetch reviews. Please try again.",
                context={"user_id": str(identity.subject_id)},
            )

    async def list_all(self, db: AsyncSession) -> List[ReviewDetail]:
        try:
            result = await db.execute(
                select(Review).options(*_DETAIL_OPTIONS).order_by(Review.created_at.desc())
            )
            return [ReviewDetail.model_validate(r) for r in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing reviews: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to fetch reviews. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_review(
        self, db: AsyncSession, identity: Identity, review_id: uuid.UUID
    ) -> ReviewDetail:
        """
        One review, visible to its owner and to admins.

        Raises:
            NotFoundError: unknown id
            ForbiddenError: caller is neither the owner nor an admin
        """
        try:
            result = await db.execute(
                select(Review).where(Review.id == review_id).options(*_DETAIL_OPTIONS)
            )
            review = result.scalar_one_or_none()
            if review is None:
                raise NotFoundError(resource="review", resource_id=str(review_id))

            enforce(identity, Operation.READ_OWN_REVIEWS, owner_id=review.user_id)
            return ReviewDetail.model_validate(review)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error fetching review %s: %s", review_id, str(e))
            raise StorageError(
                message="Failed to fetch review. Please try again.",
                context={"review_id": str(review_id)},
            )

    async def create_review(
        self, db: AsyncSession, identity: Identity, payload: ReviewCreate
    ) -> ReviewResponse:
        """
        Create a review owned by the caller.

        Raises:
            ValidationError: not exactly one target, bad rating, unknown target
            UnauthenticatedError: the session subject no longer exists
        """
        data = normalize_review(payload)

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

            review = Review(user_id=identity.subject_id, **data)
            db.add(review)
            await db.flush()
            logger.info("Review created: %s by %s", review.id, identity.subject_id)
            return ReviewResponse.model_validate(review)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error creating review: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to create review. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_review(
        self, db: AsyncSession, review_id: uuid.UUID, payload: ReviewUpdate
    ) -> ReviewResponse:
        data = normalize_review_update(payload)

        try:
            review = await db.get(Review, review_id)
            if review is None:
                raise NotFoundError(resource="review", resource_id=str(review_id))

            for key, value in data.items():
                setattr(review, key, value)
            review.updated_at = utcnow()
            await db.flush()
            return ReviewResponse.model_validate(review)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error updating review %s: %s", review_id, str(e))
            raise StorageError(
                message="Failed to update review. Please try again.",
                context={"review_id": str(review_id)},
            )

    async def delete_review(self, db: AsyncSession, review_id: uuid.UUID) -> None:
        try:
            review = await db.get(Review, review_id)
            if review is None:
                raise NotFoundError(resource="review", resource_id=str(review_id))
            await db.delete(review)
            await db.flush()
            logger.info("Review deleted: %s", review_id)
        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error deleting review %s: %s", review_id, str(e))
            raise StorageError(
                message="Failed to delete review. Please try again.",
                context={"review_id": str(review_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
review_service = ReviewService()
