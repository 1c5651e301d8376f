"""
Tourlist Backend - Request Dependencies
========================================

What:  FastAPI dependencies that hand each handler its Identity and its
       collaborators explicitly.
How:   Read the shared components create_app() stored on `app.state`
       (session resolver, media and upload services) and resolve them per request.

Example:
    @router.post("/hotels")
    async def create_hotel(
        payload: HotelCreate,
        identity: Identity = Depends(require(Operation.MANAGE_LISTINGS)),
        db: AsyncSession = Depends(get_db_session),
    ): ...
"""

from typing import Callable

from fastapi import Request

from app.auth import Identity, Operation, SessionResolver, enforce
from app.services.media_base import MediaService
from app.services.upload_service import UploadService


def get_identity(request: Request) -> Identity:
    """Resolve the caller's Identity (GUEST when no valid session)."""
    resolver: SessionResolver = request.app.state.session_resolver
    identity = resolver.resolve(request)
    request.state.identity = identity
    return identity


def require(operation: Operation) -> Callable[[Request], Identity]:
    """
    Build a dependency that resolves the Identity and enforces `operation`.

    FastAPI solves dependencies before it reports body validation errors,
    so an unauthorized caller gets a 401 even when the body is also invalid.
    """

    def dependency(request: Request) -> Identity:
        return enforce(get_identity(request), operation)

    dependency.__name__ = f"require_{operation.value}"
    return dependency


def get_media_service(request: Request) -> MediaService:
    return request.app.state.media_service


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service
