"""
Tourlist Backend - Image Upload Route Handler
==============================================

What:  POST /upload, storing 1..5 listing images on the media service.

Request Flow:
    1. Admin gate (UPLOAD_IMAGES) runs before the form is parsed
    2. multipart/form-data, repeated `images` field
    3. UploadService validates every file, then uploads them concurrently
    4. 200 with a JSON array of {url, publicId, width, height}
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.auth import Identity, Operation
from app.dependencies import get_media_service, get_upload_service, require
from app.schemas.common import ErrorResponse
from app.schemas.upload import ImageDescriptor
from app.services.media_base import MediaService
from app.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


@router.post(
    "/upload",
    response_model=List[ImageDescriptor],
    responses={
        400: {"description": "No images, too many images, or an invalid file", "model": ErrorResponse},
        401: {"description": "Not signed in as an admin", "model": ErrorResponse},
        500: {"description": "Media service failure", "model": ErrorResponse},
    },
    summary="Upload listing images",
    description=(
        "Upload 1 to 5 images (JPG, PNG, WEBP, GIF) in the `images` form field. "
        "Images are resized to 800x600 and stored on the media service. "
        "If any image fails, none are kept."
    ),
)
async def upload_images(
    identity: Identity = Depends(require(Operation.UPLOAD_IMAGES)),
    images: Optional[List[UploadFile]] = File(
        default=None,
        description="Image files, repeated form field",
    ),
    uploader: UploadService = Depends(get_upload_service),
    media: MediaService = Depends(get_media_service),
) -> List[ImageDescriptor]:
    return await uploader.upload(images, media)
