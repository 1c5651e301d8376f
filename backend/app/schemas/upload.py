"""
Tourlist Backend - Upload Schemas
==================================
"""

from app.schemas.common import ApiModel


class ImageDescriptor(ApiModel):
    """
    One uploaded image, as stored by the media service.

    Example:
        {"url": "https://res.cloudinary.com/.../kakum.jpg",
         "publicId": "travel-app/kakum", "width": 800, "height": 600}
    """

    url: str
    public_id: str
    width: int
    height: int
