"""Pydantic request/response schemas."""

from stagefront.schemas.auth import FormDescriptor, FormField, RegistrationData
from stagefront.schemas.health import HealthResponse
from stagefront.schemas.listings import (
    ArtistItem,
    ArtistsResponse,
    BandsResponse,
    EventItem,
    EventsResponse,
)
from stagefront.schemas.profile import (
    BandSummary,
    EventSummary,
    ProfileView,
    Role,
    UserProfile,
)

__all__ = [
    "ArtistItem",
    "ArtistsResponse",
    "BandSummary",
    "BandsResponse",
    "EventItem",
    "EventSummary",
    "EventsResponse",
    "FormDescriptor",
    "FormField",
    "HealthResponse",
    "ProfileView",
    "RegistrationData",
    "Role",
    "UserProfile",
]
