"""ORM model for community events."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from stagefront.models.base import Base


class Event(Base):
    """
    Listed event. organizer_id points at the event_organizer user who created
    it; events added anonymously have none.
    """

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(1024), nullable=True)
    organizer_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
