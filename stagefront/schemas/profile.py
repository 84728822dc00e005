"""Pydantic schemas for role-based profile views."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Roles that have a profile view."""

    MUSICIAN = "musician"
    BAND_MEMBER = "band_member"
    EVENT_ORGANIZER = "event_organizer"

    @classmethod
    def parse(cls, value: str | None) -> "Role | None":
        """Return the matching role, or None for values with no profile view."""
        try:
            return cls(value)
        except ValueError:
            return None


ProfileVariant = Literal["musician", "band", "organizer"]


class UserProfile(BaseModel):
    """Public profile attributes (never the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    description: str
    instrument: str | None = None
    profile_picture: str | None = None
    video: str | None = None
    audio: str | None = None


class BandSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str


class EventSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    image_url: str | None = None
    organizer_id: int | None = None


class ProfileView(BaseModel):
    """Render model for GET /profile: the user plus role-specific listings."""

    view: ProfileVariant = Field(..., description="Which profile template applies")
    user: UserProfile
    bands: list[BandSummary] | None = Field(
        default=None, description="Bands joined through membership (band_member only); order unspecified"
    )
    events: list[EventSummary] | None = Field(
        default=None, description="Events organized by the user (event_organizer only)"
    )
