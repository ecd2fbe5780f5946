"""
Auth service: credential checks and self-registration.

Thin wrapper over ``user_service``; it owns only the password hashing
step and the "email already taken" check.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models import User
from marketplace.passwords import hash_password, verify_password
from marketplace.schemas import Register
from marketplace.services import user_service


async def user_exists(db: AsyncSession, email: str) -> bool:
    return await user_service.get_user_by_email(db, email) is not None


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the enabled account matching *email* and *password*, else None."""
    user = await user_service.get_user_by_email(db, email)
    if user is None or not user.enabled:
        return None
    if not verify_password(password, user.password):
        return None
    return user


async def login(db: AsyncSession, email: str, password: str) -> bool:
    return await authenticate(db, email, password) is not None


async def register(db: AsyncSession, data: Register) -> bool:
    """
    Create an enabled account from a registration form.

    Returns False when the email is already registered.
    """
    if await user_exists(db, data.username):
        return False

    user = User(
        email=data.username,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        role=data.role.value,
        password=hash_password(data.password),
        enabled=True,
    )
    await user_service.create_user(db, user)
    return True
