"""SQLAlchemy ORM models."""

from stagefront.models.artist import Artist
from stagefront.models.band import Band, user_bands
from stagefront.models.base import Base
from stagefront.models.event import Event
from stagefront.models.user import User

__all__ = ["Artist", "Band", "Base", "Event", "User", "user_bands"]
