"""
Comment service: comments posted under an ad.

A comment stores the author's first name and avatar reference as they
were when it was posted.  Renaming an account or changing its avatar
later does not rewrite existing comments.
"""
import logging
import time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.errors import Forbidden, Outcome
from marketplace.models import Ad, Comment, User
from marketplace.schemas import CommentCreateOrUpdate
from marketplace.services.authorization import is_owner_or_admin

logger = logging.getLogger(__name__)


def _comment_to_dict(comment: Comment) -> dict:
    return {
        "pk": comment.id,
        "author": comment.author_id,
        "author_first_name": comment.author_first_name,
        "author_image": comment.author_image,
        "created_at": comment.created_at,
        "text": comment.text,
    }


async def _get_ad_comment(db: AsyncSession, ad_id: int, comment_id: int) -> Comment | None:
    """Load *comment_id* only if it belongs to *ad_id*."""
    comment = await db.get(Comment, comment_id)
    if comment is None or comment.ad_id != ad_id:
        return None
    return comment


async def get_comments(db: AsyncSession, ad_id: int) -> dict | None:
    """
    Return the comments of *ad_id* in posting order.

    Returns None when the ad itself does not exist; an ad without
    comments yields ``{"count": 0, "results": []}``.
    """
    if await db.get(Ad, ad_id) is None:
        return None

    q = select(Comment).where(Comment.ad_id == ad_id).order_by(Comment.id)
    result = await db.execute(q)
    results = [_comment_to_dict(c) for c in result.scalars().all()]
    return {"count": len(results), "results": results}


async def add_comment(
    db: AsyncSession,
    actor: User,
    ad_id: int,
    data: CommentCreateOrUpdate,
) -> dict | None:
    """
    Post a comment by *actor* under *ad_id*.

    Returns None when the ad does not exist.
    """
    if await db.get(Ad, ad_id) is None:
        return None

    comment = Comment(
        text=data.text,
        created_at=time.time_ns() // 1_000_000,
        author_first_name=actor.first_name,
        author_image=actor.image,
        author_id=actor.id,
        ad_id=ad_id,
    )
    db.add(comment)
    await db.flush()

    logger.info("User %s commented on ad %s", actor.id, ad_id)
    return _comment_to_dict(comment)


async def delete_comment(
    db: AsyncSession, actor: User, ad_id: int, comment_id: int
) -> Outcome:
    comment = await _get_ad_comment(db, ad_id, comment_id)
    if comment is None:
        return Outcome.NOT_FOUND
    if not is_owner_or_admin(actor, comment.author_id):
        return Outcome.FORBIDDEN

    await db.delete(comment)
    await db.flush()
    logger.info("User %s deleted comment %s on ad %s", actor.id, comment_id, ad_id)
    return Outcome.OK


async def update_comment(
    db: AsyncSession,
    actor: User,
    data: CommentCreateOrUpdate,
    comment_id: int,
    ad_id: int,
) -> dict | None:
    """
    Replace the text of a comment.

    Returns None when the comment does not exist under *ad_id* and raises
    ``Forbidden`` when *actor* is neither its author nor an administrator.
    """
    comment = await _get_ad_comment(db, ad_id, comment_id)
    if comment is None:
        return None
    if not is_owner_or_admin(actor, comment.author_id):
        raise Forbidden()

    comment.text = data.text
    await db.flush()
    return _comment_to_dict(comment)
