"""Image upload storage.

Images are written to the configured upload directory under a random
name and served back from the static mount at `upload_url_prefix`.
"""

import os
import secrets
from pathlib import Path

from med1.logging_config import get_logger
from med1.settings import settings

logger = get_logger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
ALLOWED_IMAGE_MIME_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}

FILE_PERMISSIONS = 0o644


class UploadError(Exception):
    """Rejected or failed upload."""
    pass


class ImageUploadService:
    """Validates and stores uploaded images."""

    def __init__(
        self,
        upload_dir: str | Path | None = None,
        url_prefix: str | None = None,
        max_size_bytes: int | None = None,
    ):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")
        self.max_size_bytes = max_size_bytes or settings.max_image_size_mb * 1024 * 1024
        self.logger = get_logger(__name__)

    def validate(self, filename: str | None, content_type: str | None, size: int) -> str:
        """Check name, type and size of an upload.

        Returns:
            Normalized (lowercase) file extension

        Raises:
            UploadError: If the upload is not an acceptable image
        """
        if not filename:
            raise UploadError("Upload must have a filename")

        ext = os.path.splitext(os.path.basename(filename))[1].lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS:
            raise UploadError(f"File extension not allowed: {ext or '(none)'}")

        if content_type and content_type not in ALLOWED_IMAGE_MIME_TYPES:
            raise UploadError(f"MIME type not allowed: {content_type}")

        if size <= 0:
            raise UploadError("Upload file is empty")
        if size > self.max_size_bytes:
            raise UploadError(f"File size exceeds limit of {self.max_size_bytes} bytes")

        return ".jpg" if ext == ".jpeg" else ext

    def save_image(
        self,
        data: bytes,
        filename: str | None,
        content_type: str | None = None,
        owner_id: int | None = None,
    ) -> str:
        """Validate and store an image.

        Args:
            data: Raw file content
            filename: Client-supplied file name (only the extension is kept)
            content_type: Client-supplied MIME type
            owner_id: Uploading user, used as a name prefix

        Returns:
            Public URL of the stored image
        """
        ext = self.validate(filename, content_type, len(data))

        token = secrets.token_hex(12)
        stored_name = f"{owner_id}_{token}{ext}" if owner_id else f"{token}{ext}"

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / stored_name
        path.write_bytes(data)
        path.chmod(FILE_PERMISSIONS)

        self.logger.info("image_uploaded", owner_id=owner_id, file=stored_name, size=len(data))
        return f"{self.url_prefix}/{stored_name}"


# Singleton instance
image_upload_service = ImageUploadService()
