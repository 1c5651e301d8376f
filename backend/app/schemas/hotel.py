"""
Tourlist Backend - Hotel Schemas
=================================

What:  Hotel request bodies and responses.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from app.schemas.common import ApiModel
from app.schemas.review import ReviewSummary, ReviewWithAuthor


class HotelCreate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
    rating: Optional[float] = None
    price_per_night: Optional[float] = None
    amenities: Optional[List[str]] = None
    available_rooms: Optional[int] = None
    destination_id: Optional[uuid.UUID] = None


class HotelUpdate(HotelCreate):
    """Partial update: only keys present in the body are applied."""


class DestinationRef(ApiModel):
    id: uuid.UUID
    name: str
    location: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class HotelResponse(ApiModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    images: List[str] = []
    rating: float
    price_per_night: Optional[float] = None
    amenities: List[str] = []
    available_rooms: int
    destination_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class HotelListItem(HotelResponse):
    """Entry of GET /hotels."""

    destination: Optional[DestinationRef] = None
    reviews: List[ReviewSummary] = []


class HotelDetail(HotelResponse):
    destination: Optional[DestinationRef] = None
    reviews: List[ReviewWithAuthor] = []
