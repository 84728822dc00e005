"""Profile resolver: pick the profile view for a user's role and load its supplementary data."""

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.orm import Session

from stagefront.models import Band, Event, User, user_bands
from stagefront.schemas.profile import (
    BandSummary,
    EventSummary,
    ProfileView,
    Role,
    UserProfile,
)
from stagefront.services.credentials import run_query

logger = logging.getLogger(__name__)


class ProfileNotFoundError(Exception):
    """Raised when a user's role has no profile view (maps to 404)."""

    def __init__(self, role: str | None) -> None:
        self.role = role
        super().__init__("Profile not found")


async def _musician_profile(db: Session, user: User) -> ProfileView:
    return ProfileView(view="musician", user=UserProfile.model_validate(user))


async def _band_member_profile(db: Session, user: User) -> ProfileView:
    rows = await run_query(
        db,
        "band membership lookup",
        lambda: (
            db.query(Band)
            .join(user_bands, Band.id == user_bands.c.band_id)
            .filter(user_bands.c.user_id == user.id)
            .all()
        ),
    )
    return ProfileView(
        view="band",
        user=UserProfile.model_validate(user),
        bands=[BandSummary.model_validate(b) for b in rows],
    )


async def _organizer_profile(db: Session, user: User) -> ProfileView:
    rows = await run_query(
        db,
        "organizer events lookup",
        lambda: db.query(Event).filter(Event.organizer_id == user.id).all(),
    )
    return ProfileView(
        view="organizer",
        user=UserProfile.model_validate(user),
        events=[EventSummary.model_validate(e) for e in rows],
    )


PROFILE_HANDLERS: dict[Role, Callable[[Session, User], Awaitable[ProfileView]]] = {
    Role.MUSICIAN: _musician_profile,
    Role.BAND_MEMBER: _band_member_profile,
    Role.EVENT_ORGANIZER: _organizer_profile,
}


async def resolve_profile(db: Session, user: User) -> ProfileView:
    """
    Build the render model for the user's role.

    Each role issues at most one extra query. Unrecognized roles raise
    ProfileNotFoundError; query failures raise CredentialStoreError.
    """
    role = Role.parse(user.role)
    if role is None:
        logger.info("No profile view for role", extra={"user_id": user.id, "role": user.role})
        raise ProfileNotFoundError(user.role)
    return await PROFILE_HANDLERS[role](db, user)
