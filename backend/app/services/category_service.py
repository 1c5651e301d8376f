"""
Tourlist Backend - Attraction Category Service
===============================================

What:  Business logic for attraction categories: list, detail, create,
       update, delete.
How:   Runs the category validator, checks name uniqueness, talks to the
       store through the request's AsyncSession.
Who:   Called by the /attraction-categories route handlers.

Uniqueness:
    The name check is done twice. `_find_by_name()` gives the friendly
    message for the common case; the `uq_attraction_categories_name`
    constraint catches two concurrent creates that both passed the check.
    Both paths raise the same ConflictError.

Error Handling Strategy:
    TourlistError subclasses propagate unchanged. Any other exception from
    the store is logged and wrapped in StorageError, so raw driver messages
    never reach the client.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    ConflictError,
    NotFoundError,
    StorageError,
    TourlistError,
    ValidationError,
)
from app.models import Attraction, AttractionCategory
from app.models._columns import utcnow
from app.schemas.category import (
    CategoryAttraction,
    CategoryCreate,
    CategoryDetail,
    CategoryListItem,
    CategoryResponse,
    CategoryUpdate,
)
from app.services.validation import normalize_category

logger = logging.getLogger(__name__)

DUPLICATE_NAME_MESSAGE = "A category with this name already exists"


class CategoryService:
    """
    Stateless service for category operations.

    Every method receives the request's session; nothing is kept between calls.
    """

    async def _find_by_name(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[AttractionCategory]:
        """Exact, case-sensitive lookup by (already trimmed) name."""
        query = select(AttractionCategory).where(AttractionCategory.name == name)
        if exclude_id is not None:
            query = query.where(AttractionCategory.id != exclude_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def _get_or_404(
        self, db: AsyncSession, category_id: uuid.UUID
    ) -> AttractionCategory:
        category = await db.get(AttractionCategory, category_id)
        if category is None:
            raise NotFoundError(resource="category", resource_id=str(category_id))
        return category

    async def list_categories(self, db: AsyncSession) -> List[CategoryListItem]:
        """
        All categories ordered by name, each with its attraction count.

        Query plan:
            SELECT c.*, count(a.id) FROM attraction_categories c
            LEFT JOIN attractions a ON a.category_id = c.id
            GROUP BY c.id ORDER BY c.name
        """
        try:
            query = (
                select(AttractionCategory, func.count(Attraction.id))
                .outerjoin(Attraction, Attraction.category_id == AttractionCategory.id)
                .group_by(AttractionCategory.id)
                .order_by(AttractionCategory.name.asc())
            )
            result = await db.execute(query)
            return [
                CategoryListItem(
                    **CategoryResponse.model_validate(category).model_dump(),
                    attraction_count=count,
                )
                for category, count in result.all()
            ]
        except Exception as e:
            logger.error("Database error listing categories: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to fetch attraction categories. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_category(
        self, db: AsyncSession, category_id: uuid.UUID
    ) -> CategoryDetail:
        try:
            result = await db.execute(
                select(AttractionCategory)
                .where(AttractionCategory.id == category_id)
                .options(selectinload(AttractionCategory.attractions))
            )
            category = result.scalar_one_or_none()
            if category is None:
                raise NotFoundError(resource="category", resource_id=str(category_id))

            attractions = sorted(category.attractions, key=lambda a: a.name)
            return CategoryDetail(
                **CategoryResponse.model_validate(category).model_dump(),
                attraction_count=len(attractions),
                attractions=[CategoryAttraction.model_validate(a) for a in attractions],
            )
        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error fetching category %s: %s", category_id, str(e))
            raise StorageError(
                message="Failed to fetch attraction category. Please try again.",
                context={"category_id": str(category_id)},
            )

    async def create_category(
        self, db: AsyncSession, payload: CategoryCreate
    ) -> CategoryResponse:
        """
        Create a category from a validated, trimmed payload.

        Raises:
            ValidationError: name missing or blank
            ConflictError: a category with the trimmed name exists
            StorageError: unexpected store failure
        """
        data = normalize_category(payload)

        try:
            if await self._find_by_name(db, data["name"]) is not None:
                raise ConflictError(message=DUPLICATE_NAME_MESSAGE, field="name")

            category = AttractionCategory(**data)
            db.add(category)
            await db.flush()
            logger.info("Category created: %s (%s)", category.id, category.name)
            return CategoryResponse.model_validate(category)

        except TourlistError:
            raise
        except IntegrityError:
            logger.info("Category name %r rejected by unique constraint", data["name"])
            raise ConflictError(message=DUPLICATE_NAME_MESSAGE, field="name")
        except Exception as e:
            logger.error("Database error creating category: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to create attraction category. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_category(
        self,
        db: AsyncSession,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> CategoryResponse:
        """Rename / recolor. The uniqueness rule excludes the category itself."""
        data = normalize_category(payload)

        try:
            category = await self._get_or_404(db, category_id)
            if await self._find_by_name(db, data["name"], exclude_id=category_id) is not None:
                raise ConflictError(message=DUPLICATE_NAME_MESSAGE, field="name")

            for key, value in data.items():
                setattr(category, key, value)
            category.updated_at = utcnow()
            await db.flush()
            return CategoryResponse.model_validate(category)

        except TourlistError:
            raise
        except IntegrityError:
            raise ConflictError(message=DUPLICATE_NAME_MESSAGE, field="name")
        except Exception as e:
            logger.error("Database error updating category %s: %s", category_id, str(e))
            raise StorageError(
                message="Failed to update attraction category. Please try again.",
                context={"category_id": str(category_id)},
            )

    async def delete_category(self, db: AsyncSession, category_id: uuid.UUID) -> None:
        """
        Delete a category that no attraction references.

        Raises:
            NotFoundError: unknown id
            ValidationError: attractions still reference the category
        """
        try:
            category = await self._get_or_404(db, category_id)
            count = await db.scalar(
                select(func.count(Attraction.id)).where(
                    Attraction.category_id == category_id
                )
            )
            if count:
                raise ValidationError(
                    message=(
                        "Cannot delete category that has attractions. "
                        "Please move or delete the attractions first."
                    ),
                    context={"attraction_count": count},
                )

            await db.delete(category)
            await db.flush()
            logger.info("Category deleted: %s", category_id)

        except TourlistError:
            raise
        except Exception as e:
            logger.error("Database error deleting category %s: %s", category_id, str(e))
            raise StorageError(
                message="Failed to delete attraction category. Please try again.",
                context={"category_id": str(category_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
category_service = CategoryService()
