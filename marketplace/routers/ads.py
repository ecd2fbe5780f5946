import json

import pydantic
from fastapi import APIRouter, Depends, Form, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.database import get_db
from marketplace.dependencies import ImageUpload, get_current_user, get_image_upload
from marketplace.errors import Outcome
from marketplace.models import User
from marketplace.schemas import (
    AdCreateOrUpdate,
    AdResponse,
    AdsResponse,
    CommentCreateOrUpdate,
    CommentResponse,
    CommentsResponse,
    ExtendedAd,
)
from marketplace.services import ad_service, comment_service

router = APIRouter(prefix="/ads", tags=["ads"])


def _raise_for_outcome(outcome: Outcome, detail: str) -> None:
    if outcome is Outcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail=detail)
    if outcome is Outcome.FORBIDDEN:
        raise HTTPException(status_code=403, detail="Not the author or an administrator")


@router.get("", response_model=AdsResponse)
async def list_ads(
    current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)
):
    return await ad_service.get_ads(db)

@router.post("", status_code=201, response_model=AdResponse)
async def create_ad(
    properties: str = Form(...),
    upload: ImageUpload = Depends(get_image_upload),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    # The "properties" part arrives as a JSON document next to the file.
    try:
        data = AdCreateOrUpdate.model_validate_json(properties)
    except pydantic.ValidationError as exc:
        raise HTTPException(status_code=422, detail=json.loads(exc.json()))
    return await ad_service.create_ad(db, current_user, data, upload.data, upload.filename)

@router.get("/me", response_model=AdsResponse)
async def list_my_ads(
    current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)
):
    return await ad_service.get_my_ads(db, current_user)

@router.get("/{ad_id}", response_model=ExtendedAd)
async def get_ad(
    ad_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ad = await ad_service.get_ad(db, ad_id)
    if not ad:
        raise HTTPException(status_code=404, detail="Ad not found")
    return ad

@router.delete("/{ad_id}", status_code=204)
async def remove_ad(
    ad_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    _raise_for_outcome(await ad_service.remove_ad(db, current_user, ad_id), "Ad not found")

@router.patch("/{ad_id}", response_model=AdResponse)
async def update_ad(
    ad_id: int,
    data: AdCreateOrUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ad = await ad_service.update_ad(db, current_user, ad_id, data)
    if not ad:
        raise HTTPException(status_code=404, detail="Ad not found")
    return ad

@router.patch("/{ad_id}/image")
async def update_ad_image(
    ad_id: int,
    upload: ImageUpload = Depends(get_image_upload),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    content = await ad_service.replace_image(db, current_user, ad_id, upload.data, upload.filename)
    if content is None:
        raise HTTPException(status_code=404, detail="Ad not found")
    return Response(content=content, media_type="application/octet-stream")


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@router.get("/{ad_id}/comments", response_model=CommentsResponse)
async def list_comments(
    ad_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comments = await comment_service.get_comments(db, ad_id)
    if comments is None:
        raise HTTPException(status_code=404, detail="Ad not found")
    return comments

@router.post("/{ad_id}/comments", response_model=CommentResponse)
async def add_comment(
    ad_id: int,
    data: CommentCreateOrUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await comment_service.add_comment(db, current_user, ad_id, data)
    if not comment:
        raise HTTPException(status_code=404, detail="Ad not found")
    return comment

@router.delete("/{ad_id}/comments/{comment_id}")
async def delete_comment(
    ad_id: int,
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    outcome = await comment_service.delete_comment(db, current_user, ad_id, comment_id)
    _raise_for_outcome(outcome, "Comment not found")

@router.patch("/{ad_id}/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    ad_id: int,
    comment_id: int,
    data: CommentCreateOrUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await comment_service.update_comment(db, current_user, data, comment_id, ad_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment
