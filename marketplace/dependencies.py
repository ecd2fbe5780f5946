from fastapi import Depends, File, HTTPException, UploadFile, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.database import get_db
from marketplace.models import User
from marketplace.services import auth_service

basic_auth = HTTPBasic(auto_error=False)


async def get_current_user(
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the acting account from HTTP Basic credentials.

    The username is the account email.  Missing or wrong credentials, and
    disabled accounts, all produce the same 401.
    """
    user = None
    if credentials is not None:
        user = await auth_service.authenticate(db, credentials.username, credentials.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return user


class ImageUpload:
    """An uploaded picture: raw bytes plus the client-supplied file name."""

    def __init__(self, data: bytes, filename: str | None) -> None:
        self.data = data
        self.filename = filename


async def get_image_upload(image: UploadFile = File(...)) -> ImageUpload:
    """
    Reusable FastAPI dependency that reads the multipart ``image`` part.

    Usage in a router::

        @router.patch("/me/image")
        async def update_image(upload: ImageUpload = Depends(get_image_upload)):
            ...

    Rejects (400) empty files and content types other than ``image/*``.
    The file name is passed on untouched; the service layer derives the
    stored name's extension from it.
    """
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Upload must be an image")
    data = await image.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded image is empty")
    return ImageUpload(data, image.filename)
