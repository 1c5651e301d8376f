"""
Tourlist Backend - Attraction Category Schemas
===============================================

What:  Category request bodies and responses.

Request fields are all Optional on purpose: a missing or blank `name`
must produce the domain message "Category name is required" (400) from the
validators, not a generic schema error.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from app.schemas.common import ApiModel


class CategoryCreate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class CategoryUpdate(CategoryCreate):
    pass


class CategoryResponse(ApiModel):
    """
    Example:
        {"id": "...", "name": "Beach", "description": null, "color": null,
         "createdAt": "...", "updatedAt": "..."}
    """

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CategoryListItem(CategoryResponse):
    attraction_count: int = 0


class CategoryRef(ApiModel):
    """Category nested into an attraction."""

    id: uuid.UUID
    name: str
    color: Optional[str] = None


class CategoryAttraction(ApiModel):
    """Attraction as listed on its category's detail page."""

    id: uuid.UUID
    name: str
    location: Optional[str] = None
    rating: float
    price: Optional[float] = None


class CategoryDetail(CategoryListItem):
    attractions: List[CategoryAttraction] = []
