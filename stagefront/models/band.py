"""ORM models for bands and the user/band membership relation."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text

from stagefront.models.base import Base

# Membership join: one row per (user, band) pair.
user_bands = Table(
    "user_bands",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("band_id", Integer, ForeignKey("bands.id", ondelete="CASCADE"), primary_key=True),
)


class Band(Base):
    __tablename__ = "bands"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
