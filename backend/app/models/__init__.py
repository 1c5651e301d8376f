"""
Tourlist Backend - ORM Models
==============================

Importing this package registers every table on Base.metadata
(used by Database.create_all() and Alembic autogenerate).
"""

from app.models.attraction import Attraction
from app.models.booking import Booking, BookingStatus, BookingType
from app.models.category import AttractionCategory
from app.models.destination import Destination
from app.models.hotel import Hotel
from app.models.review import Review
from app.models.user import User

__all__ = [
    "Attraction",
    "AttractionCategory",
    "Booking",
    "BookingStatus",
    "BookingType",
    "Destination",
    "Hotel",
    "Review",
    "User",
]
