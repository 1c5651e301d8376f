"""
Tourlist Backend - Abstract Media Service Interface
====================================================

What:  Contract for the external image host the upload coordinator talks to.
How:   Concrete implementations inherit from MediaService; create_app()
       stores one instance on `app.state.media_service`.
Who:   Called by UploadService and by the health check.

Implementations:
    - CloudinaryMediaService: Cloudinary upload API (default)
    - Tests substitute an in-memory fake through `app.state.media_service`
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.upload import ImageDescriptor


class MediaService(ABC):
    """
    Abstract interface for storing and deleting hosted images.

    Contract:
        - upload_image() stores one image and describes the stored result
        - Implementations handle their own retries and error translation
        - Every provider failure surfaces as UpstreamError
    """

    @property
    def circuit_open(self) -> bool:
        """True while the implementation is refusing calls to protect the host."""
        return False

    @abstractmethod
    async def upload_image(
        self,
        content: bytes,
        content_type: str,
        filename: Optional[str] = None,
    ) -> ImageDescriptor:
        """
        Store one image.

        Args:
            content: Raw image bytes (already validated by the caller)
            content_type: MIME type used for the data URI, e.g. "image/jpeg"
            filename: Original client filename, for logging only

        Returns:
            ImageDescriptor with the hosted URL, public id and stored dimensions

        Raises:
            UpstreamError: upload failed after retries, or the circuit is open
        """
        ...

    @abstractmethod
    async def delete_image(self, public_id: str) -> bool:
        """Remove a hosted image. Returns False instead of raising on failure."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability probe used by GET /health."""
        ...
