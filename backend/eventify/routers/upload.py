"""Image upload route; files are served back from /uploads."""
import logging
import os
import uuid
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from eventify.auth import get_current_user
from eventify.config import settings
from eventify.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter()


def file_url(filename: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/uploads/{filename}"


@router.post("/")
def upload_image(image: UploadFile = File(None), user: User = Depends(get_current_user)):
    """Store an image and return its public URL."""
    if image is None or not image.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="The file must be an image")

    ext = os.path.splitext(image.filename)[1].lower()
    filename = f"{uuid.uuid4().hex}{ext}"
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    contents = image.file.read()
    with open(os.path.join(settings.UPLOAD_DIR, filename), "wb") as fh:
        fh.write(contents)

    logger.info("User %s uploaded %s (%d bytes)", user.user_id, filename, len(contents))
    return {
        "image_url": file_url(filename),
        "filename": filename,
        "original_name": image.filename,
        "mime_type": image.content_type,
        "size": len(contents),
    }
