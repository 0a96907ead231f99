"""
Photo Service - upload student photos to Cloudinary.
"""
import logging

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from student_analysis.core.config import Settings, get_settings
from student_analysis.core.errors import TransportError
from student_analysis.utils.file_upload import StagedUpload

logger = logging.getLogger(__name__)

PHOTO_FOLDER = "student-photos"


class PhotoService:
    def __init__(self, settings: Settings):
        self.configured = all([
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret
        ])
        if not self.configured:
            logger.warning("Cloudinary credentials not configured. Photo uploads will fail.")
            return

        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True
        )

    def upload(self, staged: StagedUpload) -> str:
        """Upload a staged image and return its secure URL."""
        if not self.configured:
            raise TransportError("Cloudinary is not configured")
        try:
            result = cloudinary.uploader.upload(
                staged.path,
                folder=PHOTO_FOLDER,
                resource_type="image"
            )
        except CloudinaryError as e:
            raise TransportError(f"Cloudinary upload failed: {e}")
        logger.info("✅ Photo uploaded: %s", result.get("public_id"))
        return result["secure_url"]


def get_photo_service() -> PhotoService:
    return PhotoService(get_settings())
