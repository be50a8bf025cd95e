from typing import List
import logging

import cloudinary
import cloudinary.api
import cloudinary.uploader

from app.core.config import settings
from app.schemas.product import ProductPhoto

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
)

class CloudinaryService:

    def upload_image(self, file: bytes) -> ProductPhoto:
        result = cloudinary.uploader.upload(file, resource_type="image")
        return ProductPhoto(public_id=result["public_id"], url=result["secure_url"])

    def upload_images(self, files: List[bytes]) -> List[ProductPhoto]:
        photos = [self.upload_image(file) for file in files]
        logger.info(f"Uploaded {len(photos)} photos")
        return photos

    def delete_images(self, public_ids: List[str]) -> None:
        if not public_ids:
            return
        cloudinary.api.delete_resources(public_ids, resource_type="image")
        logger.info(f"Deleted photos {public_ids}")

cloudinary_service = CloudinaryService()
