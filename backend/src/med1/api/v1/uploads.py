"""Image upload API v1 endpoint."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from med1.auth.middleware import require_auth
from med1.auth.models import UserAccount
from med1.logging_config import get_logger
from med1.uploads.service import UploadError, image_upload_service

logger = get_logger(__name__)

router = APIRouter(tags=["uploads"])


@router.post("/upload-image")
async def upload_image(
    image: UploadFile = File(...),
    user: UserAccount = Depends(require_auth),
):
    """Store an uploaded image and return its public URL."""
    # At most one byte past the size limit is read
    data = await image.read(image_upload_service.max_size_bytes + 1)

    try:
        url = image_upload_service.save_image(
            data,
            filename=image.filename,
            content_type=image.content_type,
            owner_id=user.id,
        )
    except UploadError as e:
        logger.info("image_upload_rejected", user_id=user.id, reason=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"url": url}
