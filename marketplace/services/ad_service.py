"""
Ad service: business logic for classified ads and their pictures.

Design notes
------------
- Every mutation loads the ad, then checks the owner-or-admin rule before
  anything is written.  ``remove_ad`` reports the outcome as an
  :class:`~marketplace.errors.Outcome`; ``update_ad`` and ``replace_image``
  return ``None`` for a missing ad and raise ``Forbidden``.
- Picture files are written before the row that references them is
  flushed, so a failed write never leaves a reference to a missing file.
- The owner's contact fields in the detail view come from the ``users``
  row at request time (comments, by contrast, keep a copy).
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from marketplace import storage
from marketplace.config import settings
from marketplace.errors import Forbidden, Outcome
from marketplace.models import Ad, Comment, User
from marketplace.schemas import AdCreateOrUpdate
from marketplace.services.authorization import is_owner_or_admin

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _ad_to_dict(ad: Ad) -> dict:
    """Serialise an Ad ORM instance to the summary shape used in lists."""
    return {
        "pk": ad.id,
        "author": ad.author_id,
        "image": ad.image,
        "price": ad.price,
        "title": ad.title,
    }


def _extended_ad_to_dict(ad: Ad) -> dict:
    author = ad.author
    return {
        "pk": ad.id,
        "author_first_name": author.first_name,
        "author_last_name": author.last_name,
        "description": ad.description,
        "email": author.email,
        "image": ad.image,
        "phone": author.phone,
        "price": ad.price,
        "title": ad.title,
    }


def _ads_collection(ads) -> dict:
    results = [_ad_to_dict(a) for a in ads]
    return {"count": len(results), "results": results}


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_ads(db: AsyncSession) -> dict:
    """Return every ad in creation order."""
    result = await db.execute(select(Ad).order_by(Ad.id))
    return _ads_collection(result.scalars().all())


async def get_my_ads(db: AsyncSession, actor: User) -> dict:
    """Return the ads authored by *actor*, in creation order."""
    q = select(Ad).where(Ad.author_id == actor.id).order_by(Ad.id)
    result = await db.execute(q)
    return _ads_collection(result.scalars().all())


async def create_ad(
    db: AsyncSession,
    actor: User,
    data: AdCreateOrUpdate,
    image: bytes,
    filename: str | None,
) -> dict:
    """
    Store the picture, then create an ad owned by *actor* pointing at it.

    Raises ``ValidationError`` for a file name without an extension and
    ``AttachmentIOError`` if the picture cannot be written; no row is
    created in either case.
    """
    directory = settings.IMAGES_DIR
    reference = storage.put(directory, storage.generate_filename(filename), image)

    ad = Ad(
        title=data.title,
        price=data.price,
        description=data.description,
        image=reference,
        author_id=actor.id,
    )
    db.add(ad)
    try:
        await db.flush()
    except Exception:
        storage.discard(directory, reference)
        raise

    logger.info("User %s created ad %s", actor.id, ad.id)
    return _ad_to_dict(ad)


async def get_ad(db: AsyncSession, ad_id: int) -> dict | None:
    """
    Return the detail view of *ad_id* including the author's current
    name, email and phone, or None when the ad does not exist.
    """
    q = select(Ad).where(Ad.id == ad_id).options(joinedload(Ad.author))
    result = await db.execute(q)
    ad = result.unique().scalar_one_or_none()
    if ad is None:
        return None
    return _extended_ad_to_dict(ad)


async def update_ad(
    db: AsyncSession, actor: User, ad_id: int, data: AdCreateOrUpdate
) -> dict | None:
    """
    Overwrite title, price and description of *ad_id*.

    Returns None when the ad does not exist and raises ``Forbidden`` when
    *actor* is neither its author nor an administrator.  The author and
    picture are never touched.
    """
    ad = await db.get(Ad, ad_id)
    if ad is None:
        return None
    if not is_owner_or_admin(actor, ad.author_id):
        raise Forbidden()

    ad.title = data.title
    ad.price = data.price
    ad.description = data.description
    await db.flush()
    return _ad_to_dict(ad)


async def purge_ad(db: AsyncSession, ad: Ad) -> None:
    """
    Delete *ad*, its comments and its picture file.

    The caller has already authorised the deletion.  A picture that cannot
    be removed is logged and left behind; the rows are deleted regardless.
    """
    storage.discard(settings.IMAGES_DIR, ad.image)
    await db.execute(delete(Comment).where(Comment.ad_id == ad.id))
    await db.delete(ad)
    await db.flush()


async def remove_ad(db: AsyncSession, actor: User, ad_id: int) -> Outcome:
    ad = await db.get(Ad, ad_id)
    if ad is None:
        return Outcome.NOT_FOUND
    if not is_owner_or_admin(actor, ad.author_id):
        return Outcome.FORBIDDEN

    await purge_ad(db, ad)
    logger.info("User %s removed ad %s", actor.id, ad_id)
    return Outcome.OK


async def replace_image(
    db: AsyncSession,
    actor: User,
    ad_id: int,
    image: bytes,
    filename: str | None,
) -> bytes | None:
    """
    Swap the picture of *ad_id* and return the new picture's bytes as read
    back from the store.

    The new file is written and the reference flushed before the old file
    is deleted.  If the flush or the deletion fails the new file is
    discarded and the ad keeps its current picture.
    """
    ad = await db.get(Ad, ad_id)
    if ad is None:
        return None
    if not is_owner_or_admin(actor, ad.author_id):
        raise Forbidden()

    directory = settings.IMAGES_DIR
    previous = ad.image
    reference = storage.put(directory, storage.generate_filename(filename), image)
    ad.image = reference
    try:
        await db.flush()
        if previous:
            storage.delete(directory, previous)
    except Exception:
        ad.image = previous
        storage.discard(directory, reference)
        raise

    logger.info("Replaced picture of ad %s", ad.id)
    return storage.read(directory, reference)
