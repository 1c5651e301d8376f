"""
Tourlist Backend - Review Schemas
==================================

What:  Review request bodies and the review shapes nested into listings.
"""

import uuid
from datetime import datetime
from typing import Optional

from app.schemas.common import ApiModel


# ── Requests ──────────────────────────────────────────────────────────────

class ReviewCreate(ApiModel):
    """Exactly one of hotelId / attractionId; the owner comes from the session."""

    hotel_id: Optional[uuid.UUID] = None
    attraction_id: Optional[uuid.UUID] = None
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewUpdate(ApiModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


# ── Nested shapes ─────────────────────────────────────────────────────────

class ReviewAuthor(ApiModel):
    name: Optional[str] = None
    email: str


class UserSummary(ReviewAuthor):
    id: uuid.UUID


class ListingSummary(ApiModel):
    """Hotel or attraction as shown next to a review."""

    id: uuid.UUID
    name: str
    location: Optional[str] = None
    image_url: Optional[str] = None


class ReviewSummary(ApiModel):
    """Review nested into an attraction or hotel listing."""

    id: uuid.UUID
    user_id: uuid.UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ReviewWithAuthor(ReviewSummary):
    user: ReviewAuthor


# ── Responses ─────────────────────────────────────────────────────────────

class ReviewResponse(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    hotel_id: Optional[uuid.UUID] = None
    attraction_id: Optional[uuid.UUID] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserReviewItem(ReviewResponse):
    """Entry of GET /user/reviews."""

    hotel: Optional[ListingSummary] = None
    attraction: Optional[ListingSummary] = None


class ReviewDetail(UserReviewItem):
    """Full review, as returned to admins and to the review owner."""

    user: UserSummary


