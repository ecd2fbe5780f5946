import mimetypes

from fastapi import APIRouter, Depends, Response

from marketplace import storage
from marketplace.config import settings
from marketplace.dependencies import get_current_user
from marketplace.models import User

router = APIRouter(prefix="/images", tags=["images"])

@router.get("/{filename}")
async def get_image(filename: str, current_user: User = Depends(get_current_user)):
    # AttachmentNotFound propagates to the 404 handler registered in main.
    content = storage.read(settings.IMAGES_DIR, filename)
    media_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type)
