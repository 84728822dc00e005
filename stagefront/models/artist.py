"""ORM model for the artist directory."""

from sqlalchemy import Column, Integer, String, Text

from stagefront.models.base import Base


class Artist(Base):
    __tablename__ = "artists"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    genre = Column(String(255), nullable=True)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(1024), nullable=True)
