"""Session principal: the user id kept in the session, resolved back to a user per request."""

from sqlalchemy.orm import Session

from stagefront.models import User
from stagefront.services.credentials import find_user_by_id


def to_principal(user: User) -> int:
    """Only the id goes into the session, never the full record."""
    return user.id


async def from_principal(db: Session, principal: int) -> User | None:
    """Reload the user behind a principal; None if the row no longer exists."""
    return await find_user_by_id(db, principal)
