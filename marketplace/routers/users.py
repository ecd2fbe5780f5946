from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.database import get_db
from marketplace.dependencies import ImageUpload, get_current_user, get_image_upload
from marketplace.errors import Outcome
from marketplace.models import User
from marketplace.schemas import NewPassword, UpdateUser, UserResponse
from marketplace.services import user_service

router = APIRouter(prefix="/users", tags=["users"])

@router.post("/set_password")
async def set_password(
    data: NewPassword,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    changed = await user_service.set_password(
        db, current_user.id, data.current_password, data.new_password
    )
    if not changed:
        raise HTTPException(status_code=403, detail="Current password does not match")

@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await user_service.get_user(db, current_user.id)

@router.patch("/me", response_model=UpdateUser)
async def update_me(
    data: UpdateUser,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update_user(db, current_user.id, data)

@router.patch("/me/image")
async def update_my_image(
    upload: ImageUpload = Depends(get_image_upload),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await user_service.replace_avatar(db, current_user.id, upload.data, upload.filename)

@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    outcome = await user_service.delete_user(db, current_user, user_id)
    if outcome is Outcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail="User not found")
    if outcome is Outcome.FORBIDDEN:
        raise HTTPException(status_code=403, detail="Not the account owner or an administrator")
