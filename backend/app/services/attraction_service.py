"""
Tourlist Backend - Attraction Service
======================================

What:  Business logic for attractions: list, detail, create, update, delete.
How:   Validates through normalize_attraction(), checks the category
       reference, persists through the request's AsyncSession.
Who:   Called by the /attractions route handlers.

Listing shape:
    GET /attractions returns every attraction newest first, each with its
    category and its reviews (newest first). The detail view additionally
    nests each review's author.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import NotFoundError, StorageError, TourlistError, ValidationError
from app.models import Attraction, AttractionCategory, Review
from app.models._columns import utcnow
from app.schemas.attraction import (
    AttractionCreate,
    AttractionDetail,
    AttractionListItem,
    AttractionResponse,
    AttractionUpdate,
)
from app.services.validation import normalize_attraction

logger = logging.getLogger(__name__)


class AttractionService:
    """Stateless service for attraction operations."""

    async def _check_category(
        self, db: AsyncSession, category_id: Optional[uuid.UUID]
    ) -> None:
        if category_id is None:
            return
        if await db.get(AttractionCategory, category_id) is None:
            raise ValidationError(message="Invalid category", field="categoryId")

    async def list_attractions(self, db: AsyncSession) -> List[AttractionListItem]:
        try:
            result = await db.execute(
                select(Attraction)
                .options(
                    selectinload(Attraction.category),
                    selectinload(Attraction.reviews),
                )
                .order_by(Attraction.created_at.desc())
            )
            return [
                AttractionListItem.model_validate(attraction)
                for attraction in result.scalars().all()
            ]
        except Exception as e:
            logger.error("Database error listing attractions: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to fetch attractions. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_attraction(
        self, db: AsyncSession, attraction_id: uuid.UUID
    ) -> AttractionDetail:
        try:
            result = await db.execute(
                select(Attraction)
                .where(Attraction.id == attraction_id)
                .options(
                    selectinload(Attraction.category),
                    selectinload(Attraction.reviews).selectinload(Review.user),
                )
            )
            attraction = result.scalar_one_or_none()
            if attraction is None:
                raise NotFoundError(resource="attraction", resource_id=str(attraction_id))
            return AttractionDetail.model_validate(attraction)
        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error fetching attraction %s: %s", attraction_id, str(e))
            raise StorageError(
                message="Failed to fetch attraction. Please try again.",
                context={"attraction_id": str(attraction_id)},
            )

    async def create_attraction(
        self, db: AsyncSession, payload: AttractionCreate
    ) -> AttractionResponse:
        """
        Create an attraction.

        Defaults: rating 0, images [], availableSlots = maxVisitors.

        Raises:
            ValidationError: missing name, bad numbers, unknown category
            StorageError: unexpected store failure
        """
        data = normalize_attraction(payload)

        try:
            await self._check_category(db, data.get("category_id"))

            attraction = Attraction(**data)
            db.add(attraction)
            await db.flush()
            logger.info("Attraction created: %s (%s)", attraction.id, attraction.name)
            return AttractionResponse.model_validate(attraction)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error creating attraction: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to create attraction. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_attraction(
        self,
        db: AsyncSession,
        attraction_id: uuid.UUID,
        payload: AttractionUpdate,
    ) -> AttractionResponse:
        """Apply the fields present in `payload`; others keep their stored value."""
        try:
            attraction = await db.get(Attraction, attraction_id)
            if attraction is None:
                raise NotFoundError(resource="attraction", resource_id=str(attraction_id))

            data = normalize_attraction(payload, partial=True, existing=attraction)
            if "category_id" in data:
                await self._check_category(db, data["category_id"])

            for key, value in data.items():
                setattr(attraction, key, value)
            attraction.updated_at = utcnow()
            await db.flush()
            return AttractionResponse.model_validate(attraction)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error updating attraction %s: %s", attraction_id, str(e))
            raise StorageError(
                message="Failed to update attraction. Please try again.",
                context={"attraction_id": str(attraction_id)},
            )

    async def delete_attraction(self, db: AsyncSession, attraction_id: uuid.UUID) -> None:
        """Delete an attraction; its reviews go with it (ON DELETE CASCADE)."""
        try:
            attraction = await db.get(Attraction, attraction_id)
            if attraction is None:
                raise NotFoundError(resource="attraction", resource_id=str(attraction_id))
            await db.delete(attraction)
            await db.flush()
            logger.info("Attraction deleted: %s", attraction_id)
        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error deleting attraction %s: %s", attraction_id, str(e))
            raise StorageError(
                message="Failed to delete attraction. Please try again.",
                context={"attraction_id": str(attraction_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
attraction_service = AttractionService()
