"""
Tourlist Backend - Authorization Gate
======================================

What:  Pure decision function mapping (Identity, Operation) to a Decision.
Who:   Route dependencies (require()), SessionGateMiddleware, and the review
       and booking services for owner checks.

Operation table:
    READ_PUBLIC        guest
    MANAGE_LISTINGS    admin        create/update/delete categories, hotels, attractions
    UPLOAD_IMAGES      admin
    READ_OWN_REVIEWS   user|admin   owner_id, when given, must be the caller (admins exempt)
    WRITE_REVIEW       user|admin
    MODERATE_REVIEWS   admin        list all / update / delete reviews
    READ_OWN_BOOKINGS  user|admin   owner_id, when given, must be the caller (admins exempt)
    CREATE_BOOKING     user|admin
    MANAGE_BOOKINGS    admin        list all / update / delete bookings
    ACCESS_CHECKOUT    user|admin
    ACCESS_ADMIN_AREA  admin

A guest asking for anything above READ_PUBLIC gets UNAUTHENTICATED; an
authenticated caller without the role (or ownership) gets FORBIDDEN.
"""

import enum
import uuid
from typing import Optional

from app.auth.session import Identity, Role
from app.exceptions import ForbiddenError, UnauthenticatedError


class Operation(str, enum.Enum):
    READ_PUBLIC = "read_public"
    MANAGE_LISTINGS = "manage_listings"
    UPLOAD_IMAGES = "upload_images"
    READ_OWN_REVIEWS = "read_own_reviews"
    WRITE_REVIEW = "write_review"
    MODERATE_REVIEWS = "moderate_reviews"
    READ_OWN_BOOKINGS = "read_own_bookings"
    CREATE_BOOKING = "create_booking"
    MANAGE_BOOKINGS = "manage_bookings"
    ACCESS_CHECKOUT = "access_checkout"
    ACCESS_ADMIN_AREA = "access_admin_area"


class Decision(str, enum.Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW


_REQUIRED_ROLE = {
    Operation.READ_PUBLIC: Role.GUEST,
    Operation.MANAGE_LISTINGS: Role.ADMIN,
    Operation.UPLOAD_IMAGES: Role.ADMIN,
    Operation.READ_OWN_REVIEWS: Role.USER,
    Operation.WRITE_REVIEW: Role.USER,
    Operation.MODERATE_REVIEWS: Role.ADMIN,
    Operation.READ_OWN_BOOKINGS: Role.USER,
    Operation.CREATE_BOOKING: Role.USER,
    Operation.MANAGE_BOOKINGS: Role.ADMIN,
    Operation.ACCESS_CHECKOUT: Role.USER,
    Operation.ACCESS_ADMIN_AREA: Role.ADMIN,
}

# Operations on a single user-owned row: owner or admin only
_OWNER_SCOPED = {Operation.READ_OWN_REVIEWS, Operation.READ_OWN_BOOKINGS}


def authorize(
    identity: Identity,
    operation: Operation,
    owner_id: Optional[uuid.UUID] = None,
) -> Decision:
    """Decide whether `identity` may perform `operation`."""
    required = _REQUIRED_ROLE[operation]

    if required is Role.GUEST:
        return Decision.ALLOW

    if not identity.is_authenticated:
        return Decision.UNAUTHENTICATED

    if required is Role.ADMIN and not identity.is_admin:
        return Decision.FORBIDDEN

    if (
        operation in _OWNER_SCOPED
        and owner_id is not None
        and owner_id != identity.subject_id
        and not identity.is_admin
    ):
        return Decision.FORBIDDEN

    return Decision.ALLOW


def enforce(
    identity: Identity,
    operation: Operation,
    owner_id: Optional[uuid.UUID] = None,
) -> Identity:
    """
    authorize() that raises instead of returning a denial.

    Returns the identity unchanged so it can be used inline.

    Raises:
        UnauthenticatedError: no valid session
        ForbiddenError: valid session, insufficient role or not the owner
    """
    decision = authorize(identity, operation, owner_id)
    context = {"operation": operation.value, "role": identity.role.value}
    if decision is Decision.UNAUTHENTICATED:
        raise UnauthenticatedError(context=context)
    if decision is Decision.FORBIDDEN:
        raise ForbiddenError(context=context)
    return identity
