"""
Tourlist Backend - Image Upload Coordinator
============================================

What:  Validates a batch of uploaded image files and stores them on the
       media service, all or nothing.
Who:   Called by POST /upload after the admin gate has passed.

Validation (every file, before anything is uploaded):
    1. Count: at least 1, at most settings.max_images_per_upload
    2. Extension: .jpg .jpeg .png .webp .gif
    3. Non-empty, and no larger than settings.max_file_size

Upload:
    All files go to the media service concurrently (asyncio.gather). If any
    upload fails, the ones that succeeded in the same batch are deleted
    (best effort) and a single UpstreamError is raised, so the caller never
    receives a partial result.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from fastapi import UploadFile

from app.config import Settings
from app.exceptions import UpstreamError, ValidationError
from app.schemas.upload import ImageDescriptor
from app.services.media_base import MediaService

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}
ALLOWED_EXTENSIONS = set(ALLOWED_CONTENT_TYPES)


class UploadService:
    """
    Coordinates one upload request.

    Holds only configuration (limits), so one instance serves every request;
    the media service is passed per call.
    """

    def __init__(self, max_images: int, max_file_size: int):
        self.max_images = max_images
        self.max_file_size = max_file_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadService":
        return cls(
            max_images=settings.max_images_per_upload,
            max_file_size=settings.max_file_size,
        )

    def validate_count(self, count: int) -> None:
        if count == 0:
            raise ValidationError(message="No images provided", field="images")
        if count > self.max_images:
            raise ValidationError(
                message=f"Maximum {self.max_images} images allowed",
                field="images",
                context={"received": count, "max_images": self.max_images},
            )

    def validate_extension(self, filename: str) -> str:
        """Return the content type for an allowed extension."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="images",
                context={"filename": filename, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ALLOWED_CONTENT_TYPES[ext]

    def validate_size(self, filename: str, size: int) -> None:
        if size == 0:
            raise ValidationError(
                message=f"File '{filename}' is empty",
                field="images",
                context={"filename": filename},
            )
        if size > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=f"File '{filename}' exceeds maximum of {max_mb:.0f}MB",
                field="images",
                context={"filename": filename, "size": size, "max_size_mb": max_mb},
            )

    async def read_files(
        self, files: Sequence[UploadFile]
    ) -> List[Tuple[str, str, bytes]]:
        """
        Validate every file and read its bytes.

        The size reported by the multipart parser is checked before reading;
        the length of the bytes actually read is checked again afterwards.

        Returns:
            [(filename, content_type, content), ...] in input order
        """
        prepared = []
        for upload in files:
            filename = upload.filename or "upload"
            content_type = self.validate_extension(filename)
            # Reported part size first, so an oversized file is never read into memory
            if upload.size is not None:
                self.validate_size(filename, upload.size)
            content = await upload.read()
            self.validate_size(filename, len(content))
            prepared.append((filename, content_type, content))
        return prepared

    async def upload(
        self,
        files: Optional[Sequence[UploadFile]],
        media: MediaService,
    ) -> List[ImageDescriptor]:
        """
        Validate and upload a batch.

        Returns:
            One ImageDescriptor per file, in input order

        Raises:
            ValidationError: count, extension, empty or size check failed
            UpstreamError: any upload failed (successful ones are deleted)
        """
        files = list(files or [])
        self.validate_count(len(files))
        prepared = await self.read_files(files)

        results = await asyncio.gather(
            *(
                media.upload_image(content, content_type, filename)
                for filename, content_type, content in prepared
            ),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if not failures:
            logger.info("Uploaded %d image(s)", len(results))
            return list(results)

        uploaded = [r for r in results if isinstance(r, ImageDescriptor)]
        logger.error(
            "%d of %d image upload(s) failed; removing %d uploaded image(s)",
            len(failures),
            len(results),
            len(uploaded),
        )
        if uploaded:
            await asyncio.gather(*(media.delete_image(d.public_id) for d in uploaded))

        raise UpstreamError(
            context={
                "failed": len(failures),
                "error_types": sorted({type(f).__name__ for f in failures}),
            }
        )
