"""Response schemas for the artist, band and event listings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from stagefront.schemas.profile import BandSummary


class ArtistItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    genre: str | None = None
    description: str
    image_url: str | None = None


class EventItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    image_url: str | None = None
    organizer_id: int | None = None
    created_at: datetime | None = None


class ArtistsResponse(BaseModel):
    artists: list[ArtistItem] = Field(default_factory=list)


class BandsResponse(BaseModel):
    bands: list[BandSummary] = Field(default_factory=list)


class EventsResponse(BaseModel):
    """Events, newest first."""

    events: list[EventItem] = Field(default_factory=list)
