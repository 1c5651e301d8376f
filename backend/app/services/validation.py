"""
Tourlist Backend - Mutation Validators
=======================================

What:  Turns a request payload into the column values that will be stored,
       or raises ValidationError naming the failing field.
Who:   Called by the category, attraction, hotel and review services before
       any database write.

Normalization rules:
    - Required names are trimmed and must be non-empty after trimming
    - Optional strings are trimmed; blank → None (never stored as "")
    - Trimmed strings longer than their column are rejected, never truncated
    - List fields (images, amenities) drop blank entries; absent → []
    - rating → 0 when absent
    - attraction available_slots → max_visitors when absent
    - hotel available_rooms → 0 when absent
    - booking rooms → 1 when absent; status → PENDING on create

Partial mode (updates) only validates and returns keys the client sent,
so omitted columns keep their stored value.

Referential checks (does this category exist?) and uniqueness checks need
the database and live in the services.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import BaseModel

from app.exceptions import ValidationError
from app.models._columns import (
    CATEGORY_NAME_LENGTH,
    COLOR_LENGTH,
    LOCATION_LENGTH,
    NAME_LENGTH,
    SHORT_TEXT_LENGTH,
    URL_LENGTH,
)
from app.models.booking import BookingStatus, BookingType

MIN_LISTING_RATING = 0
MAX_LISTING_RATING = 5
MIN_REVIEW_RATING = 1
MAX_REVIEW_RATING = 5

# Optional text columns: attribute → (wire field name, column length)
_ATTRACTION_TEXT = {
    "description": ("description", None),
    "location": ("location", LOCATION_LENGTH),
    "image_url": ("imageUrl", URL_LENGTH),
    "duration": ("duration", SHORT_TEXT_LENGTH),
}
_HOTEL_TEXT = {
    "description": ("description", None),
    "location": ("location", LOCATION_LENGTH),
    "category": ("category", SHORT_TEXT_LENGTH),
    "image_url": ("imageUrl", URL_LENGTH),
}


# ── Field helpers ─────────────────────────────────────────────────────────

def _check_length(value: str, field: Optional[str], max_length: Optional[int]) -> str:
    if max_length is not None and len(value) > max_length:
        raise ValidationError(
            message=f"{field} must be at most {max_length} characters",
            field=field,
            context={"max_length": max_length, "length": len(value)},
        )
    return value


def clean_optional(
    value: Optional[str],
    field: Optional[str] = None,
    max_length: Optional[int] = None,
) -> Optional[str]:
    """Trim; blank or None → None. Longer than max_length → ValidationError."""
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        return None
    return _check_length(stripped, field, max_length)


def clean_required(
    value: Optional[str],
    field: str,
    message: str,
    max_length: Optional[int] = None,
) -> str:
    cleaned = clean_optional(value)
    if cleaned is None:
        raise ValidationError(message=message, field=field)
    return _check_length(cleaned, field, max_length)


def clean_list(values: Optional[Iterable[str]]) -> List[str]:
    if not values:
        return []
    return [v.strip() for v in values if v and v.strip()]


def _listing_rating(value: Optional[float]) -> float:
    if value is None:
        return 0
    if not MIN_LISTING_RATING <= value <= MAX_LISTING_RATING:
        raise ValidationError(
            message=f"Rating must be between {MIN_LISTING_RATING} and {MAX_LISTING_RATING}",
            field="rating",
        )
    return value


def _positive(value: Optional[float], field: str, label: str) -> Optional[float]:
    if value is not None and value <= 0:
        raise ValidationError(message=f"{label} must be a positive number", field=field)
    return value


def _non_negative(value: Optional[int], field: str, label: str) -> Optional[int]:
    if value is not None and value < 0:
        raise ValidationError(message=f"{label} cannot be negative", field=field)
    return value


def _fields(payload: BaseModel, partial: bool) -> Set[str]:
    """Names to validate: everything on create, only sent keys on update."""
    if partial:
        return set(payload.model_fields_set)
    return set(type(payload).model_fields)


# ── Categories ────────────────────────────────────────────────────────────

def normalize_category(payload: BaseModel) -> Dict[str, Any]:
    """
    Validate a category create/update body.

    Categories are always written whole (name is required on update too).

    Returns:
        {"name": str, "description": str | None, "color": str | None}

    Raises:
        ValidationError: name missing or blank, or a value longer than its column
    """
    return {
        "name": clean_required(
            payload.name, "name", "Category name is required", CATEGORY_NAME_LENGTH
        ),
        "description": clean_optional(payload.description),
        "color": clean_optional(payload.color, "color", COLOR_LENGTH),
    }


# ── Attractions ───────────────────────────────────────────────────────────

def normalize_attraction(
    payload: BaseModel,
    partial: bool = False,
    existing: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Validate an attraction create (partial=False) or update (partial=True) body.

    Args:
        payload: AttractionCreate / AttractionUpdate
        partial: only keys present in the body are validated and returned
        existing: the stored Attraction on update; its max_visitors /
                  available_slots are used for the slots-vs-capacity check
                  when the body changes only one of them

    Raises:
        ValidationError naming the failing field
    """
    fields = _fields(payload, partial)
    data: Dict[str, Any] = {}

    if "name" in fields:
        data["name"] = clean_required(
            payload.name, "name", "Attraction name is required", NAME_LENGTH
        )
    for name, (field, max_length) in _ATTRACTION_TEXT.items():
        if name in fields:
            data[name] = clean_optional(getattr(payload, name), field, max_length)
    if "category_id" in fields:
        data["category_id"] = payload.category_id
    if "images" in fields:
        data["images"] = clean_list(payload.images)
    if "rating" in fields:
        data["rating"] = _listing_rating(payload.rating)
    if "price" in fields:
        data["price"] = _positive(payload.price, "price", "Price")
    if "max_visitors" in fields:
        data["max_visitors"] = _positive(payload.max_visitors, "maxVisitors", "Max visitors")
    if "available_slots" in fields:
        data["available_slots"] = _non_negative(
            payload.available_slots, "availableSlots", "Available slots"
        )

    if not partial and data.get("available_slots") is None:
        data["available_slots"] = data.get("max_visitors")

    max_visitors = data.get("max_visitors", getattr(existing, "max_visitors", None))
    available_slots = data.get("available_slots", getattr(existing, "available_slots", None))
    if (
        max_visitors is not None
        and available_slots is not None
        and available_slots > max_visitors
    ):
        raise ValidationError(
            message="Available slots cannot exceed max visitors",
            field="availableSlots",
        )

    return data


# ── Hotels ────────────────────────────────────────────────────────────────

def normalize_hotel(payload: BaseModel, partial: bool = False) -> Dict[str, Any]:
    """
    Validate a hotel create (partial=False) or update (partial=True) body.

    Raises:
        ValidationError naming the failing field
    """
    fields = _fields(payload, partial)
    data: Dict[str, Any] = {}

    if "name" in fields:
        data["name"] = clean_required(
            payload.name, "name", "Hotel name is required", NAME_LENGTH
        )
    for name, (field, max_length) in _HOTEL_TEXT.items():
        if name in fields:
            data[name] = clean_optional(getattr(payload, name), field, max_length)
    if "images" in fields:
        data["images"] = clean_list(payload.images)
    if "amenities" in fields:
        data["amenities"] = clean_list(payload.amenities)
    if "rating" in fields:
        data["rating"] = _listing_rating(payload.rating)
    if "price_per_night" in fields:
        data["price_per_night"] = _positive(
            payload.price_per_night, "pricePerNight", "Price per night"
        )
    if "available_rooms" in fields:
        rooms = _non_negative(payload.available_rooms, "availableRooms", "Available rooms")
        data["available_rooms"] = 0 if rooms is None else rooms
    if "destination_id" in fields:
        data["destination_id"] = payload.destination_id

    return data


# ── Reviews ───────────────────────────────────────────────────────────────

def _review_rating(value: Optional[int]) -> int:
    if value is None or not MIN_REVIEW_RATING <= value <= MAX_REVIEW_RATING:
        raise ValidationError(
            message=f"Rating must be between {MIN_REVIEW_RATING} and {MAX_REVIEW_RATING}",
            field="rating",
        )
    return value


def normalize_review(payload: BaseModel) -> Dict[str, Any]:
    """
    Validate a review create body.

    The owner is never read from the body; the service sets user_id from
    the session.

    Raises:
        ValidationError: not exactly one target, or rating outside 1..5
    """
    if (payload.hotel_id is None) == (payload.attraction_id is None):
        raise ValidationError(
            message="Provide exactly one of hotelId or attractionId",
            field="hotelId",
        )
    return {
        "hotel_id": payload.hotel_id,
        "attraction_id": payload.attraction_id,
        "rating": _review_rating(payload.rating),
        "comment": clean_optional(payload.comment),
    }


def normalize_review_update(payload: BaseModel) -> Dict[str, Any]:
    fields = payload.model_fields_set
    data: Dict[str, Any] = {}
    if "rating" in fields:
        data["rating"] = _review_rating(payload.rating)
    if "comment" in fields:
        data["comment"] = clean_optional(payload.comment)
    return data


# ── Bookings ──────────────────────────────────────────────────────────────

BOOKING_TYPE_MESSAGE = "Invalid booking type. Must be either HOTEL or ATTRACTION"


def _required(value: Any, field: str, label: str) -> Any:
    if value is None:
        raise ValidationError(message=f"{label} is required", field=field)
    return value


def _check_stay(check_in: Optional[date], check_out: Optional[date], field: str) -> None:
    if check_in is not None and check_out is not None and check_out <= check_in:
        raise ValidationError(
            message="Check-out date must be after check-in date",
            field=field,
        )


def normalize_booking(payload: BaseModel) -> Dict[str, Any]:
    """
    Validate a booking create body.

    HOTEL needs hotelId, checkInDate < checkOutDate and numberOfGuests;
    numberOfRooms defaults to 1. ATTRACTION needs attractionId, date and
    numberOfPeople. totalPrice is required for both. Fields belonging to
    the other type are dropped, and every new booking starts PENDING.

    The owner is never read from the body; the service sets user_id from
    the session.

    Raises:
        ValidationError naming the failing field
    """
    booking_type = (payload.type or "").strip()
    if booking_type not in (BookingType.HOTEL.value, BookingType.ATTRACTION.value):
        raise ValidationError(message=BOOKING_TYPE_MESSAGE, field="type")

    data: Dict[str, Any] = {
        "type": booking_type,
        "hotel_id": None,
        "attraction_id": None,
        "total_price": _non_negative(
            _required(payload.total_price, "totalPrice", "Total price"),
            "totalPrice",
            "Total price",
        ),
        "status": BookingStatus.PENDING.value,
    }

    if booking_type == BookingType.HOTEL.value:
        data["hotel_id"] = _required(payload.hotel_id, "hotelId", "Hotel")
        data["check_in"] = _required(payload.check_in_date, "checkInDate", "Check-in date")
        data["check_out"] = _required(payload.check_out_date, "checkOutDate", "Check-out date")
        _check_stay(data["check_in"], data["check_out"], "checkOutDate")
        data["guests"] = _positive(
            _required(payload.number_of_guests, "numberOfGuests", "Number of guests"),
            "numberOfGuests",
            "Number of guests",
        )
        rooms = _positive(payload.number_of_rooms, "numberOfRooms", "Number of rooms")
        data["rooms"] = 1 if rooms is None else rooms
    else:
        data["attraction_id"] = _required(payload.attraction_id, "attractionId", "Attraction")
        data["visit_date"] = _required(payload.visit_date, "date", "Visit date")
        data["number_of_people"] = _positive(
            _required(payload.number_of_people, "numberOfPeople", "Number of people"),
            "numberOfPeople",
            "Number of people",
        )

    return data


def normalize_booking_update(payload: BaseModel, existing: Any) -> Dict[str, Any]:
    """
    Validate an admin booking update; only keys the client sent are returned.

    The type and target of a booking never change. Stay dates are checked
    against the stored ones when only one side is sent.

    Raises:
        ValidationError naming the failing field
    """
    fields = payload.model_fields_set
    data: Dict[str, Any] = {}

    for name in ("check_in", "check_out", "visit_date"):
        if name in fields:
            data[name] = getattr(payload, name)
    for name, field, label in (
        ("guests", "guests", "Number of guests"),
        ("rooms", "rooms", "Number of rooms"),
        ("number_of_people", "numberOfPeople", "Number of people"),
    ):
        if name in fields:
            data[name] = _positive(getattr(payload, name), field, label)
    if "total_price" in fields:
        data["total_price"] = _non_negative(
            _required(payload.total_price, "totalPrice", "Total price"),
            "totalPrice",
            "Total price",
        )
    if "status" in fields:
        status = (payload.status or "").strip()
        if status not in {s.value for s in BookingStatus}:
            raise ValidationError(
                message="Status must be one of "
                + ", ".join(s.value for s in BookingStatus),
                field="status",
            )
        data["status"] = status

    _check_stay(
        data.get("check_in", getattr(existing, "check_in", None)),
        data.get("check_out", getattr(existing, "check_out", None)),
        "checkOut",
    )
    return data
