"""ORM model for community members (credentials plus profile attributes)."""

from sqlalchemy import Column, Integer, String, Text

from stagefront.models.base import Base


class User(Base):
    """
    Registered member. Authenticates by email and password and is rendered
    according to role.

    role: 'musician', 'band_member' or 'event_organizer'. Other values are
    legal rows but have no profile view.
    Media columns hold paths relative to the upload directory.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column("password", String(255), nullable=False)
    name = Column(String(255), nullable=False, default="")
    role = Column(String(32), nullable=False)
    description = Column(Text, nullable=False, default="")
    instrument = Column(String(255), nullable=True)
    profile_picture = Column(String(1024), nullable=True)
    video = Column(String(1024), nullable=True)
    audio = Column(String(1024), nullable=True)
