"""Owner-or-administrator rule applied before every mutation."""
from marketplace.models import User


def is_owner_or_admin(actor: User, owner_id: int) -> bool:
    """Return True if *actor* may modify a record authored by *owner_id*."""
    return actor.is_admin or actor.id == owner_id
