"""Avatar/image uploads."""

from med1.uploads.service import ImageUploadService, UploadError, image_upload_service

__all__ = ["ImageUploadService", "UploadError", "image_upload_service"]
