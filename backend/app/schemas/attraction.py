"""
Tourlist Backend - Attraction Schemas
======================================

What:  Attraction request bodies and responses.

Only `name` is required; everything else is normalized by the validators
(blank strings → null, rating → 0, availableSlots → maxVisitors).
"""

import uuid
from datetime import datetime
from typing import List, Optional

from app.schemas.category import CategoryRef
from app.schemas.common import ApiModel
from app.schemas.review import ReviewSummary, ReviewWithAuthor


class AttractionCreate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
    rating: Optional[float] = None
    price: Optional[float] = None
    duration: Optional[str] = None
    max_visitors: Optional[int] = None
    available_slots: Optional[int] = None


class AttractionUpdate(AttractionCreate):
    """Partial update: only keys present in the body are applied."""


class AttractionResponse(ApiModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    image_url: Optional[str] = None
    images: List[str] = []
    rating: float
    price: Optional[float] = None
    duration: Optional[str] = None
    max_visitors: Optional[int] = None
    available_slots: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class AttractionListItem(AttractionResponse):
    """Entry of GET /attractions."""

    category: Optional[CategoryRef] = None
    reviews: List[ReviewSummary] = []


class AttractionDetail(AttractionResponse):
    """GET /attractions/{id}: reviews carry their author."""

    category: Optional[CategoryRef] = None
    reviews: List[ReviewWithAuthor] = []
