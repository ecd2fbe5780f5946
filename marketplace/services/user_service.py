"""
User service: account profile, password and avatar.

Accounts are created by registration (see ``auth_service``) with the
password already hashed.  Deleting an account removes its ads, their
pictures and comments, the account's own comments and its avatar
explicitly rather than relying on database cascades, so no picture file
outlives its owner.
"""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace import storage
from marketplace.config import settings
from marketplace.errors import Outcome
from marketplace.models import Ad, Comment, User
from marketplace.passwords import hash_password, verify_password
from marketplace.schemas import UpdateUser
from marketplace.services import ad_service
from marketplace.services.authorization import is_owner_or_admin

logger = logging.getLogger(__name__)


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone": user.phone,
        "role": user.role,
        "image": user.image,
    }


async def create_user(db: AsyncSession, user: User) -> User:
    """
    Persist a fully formed account.

    Email uniqueness is enforced by the database; callers check
    ``auth_service.user_exists`` first.
    """
    db.add(user)
    await db.flush()
    logger.info("Created account %s (%s)", user.id, user.role)
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> dict | None:
    user = await db.get(User, user_id)
    if user is None:
        return None
    return _user_to_dict(user)


async def set_password(
    db: AsyncSession, user_id: int, current_password: str, new_password: str
) -> bool:
    """
    Replace the password of *user_id*.

    Returns False, changing nothing, when the account does not exist or
    *current_password* does not match the stored hash.
    """
    user = await db.get(User, user_id)
    if user is None or not verify_password(current_password, user.password):
        return False

    user.password = hash_password(new_password)
    await db.flush()
    logger.info("Password changed for account %s", user_id)
    return True


async def update_user(db: AsyncSession, user_id: int, data: UpdateUser) -> dict | None:
    """Copy name and phone onto the account and return the applied fields."""
    user = await db.get(User, user_id)
    if user is None:
        return None

    user.first_name = data.first_name
    user.last_name = data.last_name
    user.phone = data.phone
    await db.flush()
    return data.model_dump()


async def replace_avatar(
    db: AsyncSession, user_id: int, image: bytes, filename: str | None
) -> str | None:
    """
    Store a new avatar for *user_id* and return its reference.

    The new file is written and the reference flushed before the previous
    file is deleted; if any step fails the account keeps its current avatar.
    """
    user = await db.get(User, user_id)
    if user is None:
        return None

    directory = settings.IMAGES_DIR
    previous = user.image
    reference = storage.put(directory, storage.generate_filename(filename), image)
    user.image = reference
    try:
        await db.flush()
        if previous:
            storage.delete(directory, previous)
    except Exception:
        user.image = previous
        storage.discard(directory, reference)
        raise

    return reference


async def delete_user(db: AsyncSession, actor: User, user_id: int) -> Outcome:
    """
    Delete an account together with everything it owns.

    Order: each owned ad (picture, comments, row), then the comments the
    account left elsewhere, then the avatar file, then the account row.
    """
    user = await db.get(User, user_id)
    if user is None:
        return Outcome.NOT_FOUND
    if not is_owner_or_admin(actor, user.id):
        return Outcome.FORBIDDEN

    result = await db.execute(select(Ad).where(Ad.author_id == user.id))
    ads = result.scalars().all()
    for ad in ads:
        await ad_service.purge_ad(db, ad)

    await db.execute(delete(Comment).where(Comment.author_id == user.id))
    storage.discard(settings.IMAGES_DIR, user.image)
    await db.delete(user)
    await db.flush()

    logger.info("User %s deleted account %s and %d ad(s)", actor.id, user_id, len(ads))
    return Outcome.OK
