"""Directory listings (artists, bands, events) and event creation."""

import logging

from sqlalchemy.orm import Session

from stagefront.models import Artist, Band, Event
from stagefront.services.credentials import run_query

logger = logging.getLogger(__name__)


async def list_artists(db: Session) -> list[Artist]:
    return await run_query(db, "artist listing", lambda: db.query(Artist).all())


async def list_bands(db: Session) -> list[Band]:
    return await run_query(db, "band listing", lambda: db.query(Band).all())


async def list_events(db: Session) -> list[Event]:
    """All events, newest first."""
    return await run_query(
        db, "event listing", lambda: db.query(Event).order_by(Event.id.desc()).all()
    )


async def create_event(
    db: Session,
    title: str,
    description: str,
    image_url: str | None = None,
    organizer_id: int | None = None,
) -> Event:
    event = Event(
        title=title,
        description=description,
        image_url=image_url,
        organizer_id=organizer_id,
    )

    def _insert() -> Event:
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    created = await run_query(db, "event insert", _insert)
    logger.info("Created event", extra={"event_id": created.id, "organizer_id": organizer_id})
    return created
