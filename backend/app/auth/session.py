"""
Tourlist Backend - Session Resolver
====================================

What:  Resolves the caller's Identity from a signed session token.
How:   Reads the token from the session cookie, falling back to an
       `Authorization: Bearer` header, and verifies it with PyJWT (HS256).
Who:   Built once by create_app(); used by the identity dependency and by
       SessionGateMiddleware.

Token claims:
    sub   (required) user UUID as a string
    role  "user" | "admin" (defaults to "user" when absent)
    exp   (required) expiry, seconds since epoch
    iat   issued-at

Failure policy:
    resolve() never raises. A missing, malformed, expired or tampered token,
    a token signed with another secret, a non-UUID subject or an unknown role
    all resolve to the guest identity, so gating decisions degrade to
    "unauthenticated" instead of erroring.
"""

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from starlette.requests import HTTPConnection

from app.config import Settings

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    GUEST = "guest"
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """Resolved authentication context for one request."""

    role: Role = Role.GUEST
    subject_id: Optional[uuid.UUID] = None

    @property
    def is_authenticated(self) -> bool:
        return self.role is not Role.GUEST and self.subject_id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role is Role.ADMIN


GUEST = Identity()

# Roles a token may carry; "guest" in a token is treated as invalid
_TOKEN_ROLES = {Role.USER.value: Role.USER, Role.ADMIN.value: Role.ADMIN}


class SessionResolver:
    """
    Verifies session tokens against the configured secret.

    The resolver holds only immutable configuration, so a single instance is
    shared by all requests.
    """

    def __init__(self, settings: Settings):
        self.secret = settings.session_secret
        self.algorithm = settings.session_algorithm
        self.cookie_name = settings.session_cookie_name
        self.lifetime = timedelta(seconds=settings.session_lifetime_seconds)
        self.leeway = settings.session_leeway_seconds

    def extract_token(self, request: HTTPConnection) -> Optional[str]:
        """Cookie first, then `Authorization: Bearer <token>`."""
        token = request.cookies.get(self.cookie_name)
        if token:
            return token

        header = request.headers.get("Authorization", "")
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
        return None

    def resolve(self, request: HTTPConnection) -> Identity:
        """Return the verified Identity for this request, or GUEST."""
        token = self.extract_token(request)
        if not token:
            return GUEST
        return self.decode(token)

    def decode(self, token: str) -> Identity:
        """Verify a raw token string; GUEST on any failure."""
        if not self.secret:
            return GUEST

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Session token expired")
            return GUEST
        except jwt.PyJWTError as e:
            logger.debug("Session token rejected: %s", type(e).__name__)
            return GUEST

        try:
            subject_id = uuid.UUID(str(claims["sub"]))
        except ValueError:
            logger.debug("Session token subject is not a UUID")
            return GUEST

        raw_role = claims.get("role", Role.USER.value)
        role = _TOKEN_ROLES.get(raw_role) if isinstance(raw_role, str) else None
        if role is None:
            logger.debug("Session token carries unknown role %r", claims.get("role"))
            return GUEST

        return Identity(role=role, subject_id=subject_id)

    def issue(
        self,
        subject_id: uuid.UUID,
        role: Role = Role.USER,
        lifetime: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Mint a signed token for `subject_id`.

        Used by tooling and tests; interactive sign-in belongs to the
        identity provider.
        """
        if not self.secret:
            raise ValueError("SESSION_SECRET must be set to issue session tokens")
        if role is Role.GUEST:
            raise ValueError("Guest identities do not carry session tokens")

        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(subject_id),
            "role": role.value,
            "iat": issued_at,
            "exp": issued_at + (lifetime if lifetime is not None else self.lifetime),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)
