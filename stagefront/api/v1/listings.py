"""Artist, band and event listings, plus event creation."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from stagefront.api.v1.auth import get_optional_user, internal_error, redirect
from stagefront.core.context import AppContext, get_context
from stagefront.core.database import get_db
from stagefront.models import User
from stagefront.schemas.listings import ArtistItem, ArtistsResponse, BandsResponse, EventItem, EventsResponse
from stagefront.schemas.profile import BandSummary
from stagefront.services.credentials import CredentialStoreError
from stagefront.services.listings import create_event, list_artists, list_bands, list_events
from stagefront.storage.local_storage import UploadTooLargeError, has_content

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/artists", response_model=ArtistsResponse)
async def get_artists(db: Annotated[Session, Depends(get_db)]) -> ArtistsResponse:
    try:
        rows = await list_artists(db)
    except CredentialStoreError as e:
        raise internal_error("Error fetching artists", e) from e
    return ArtistsResponse(artists=[ArtistItem.model_validate(a) for a in rows])


@router.get("/bands", response_model=BandsResponse)
async def get_bands(db: Annotated[Session, Depends(get_db)]) -> BandsResponse:
    try:
        rows = await list_bands(db)
    except CredentialStoreError as e:
        raise internal_error("Error fetching bands", e) from e
    return BandsResponse(bands=[BandSummary.model_validate(b) for b in rows])


@router.get("/events", response_model=EventsResponse)
async def get_events(db: Annotated[Session, Depends(get_db)]) -> EventsResponse:
    """All events, newest first."""
    try:
        rows = await list_events(db)
    except CredentialStoreError as e:
        raise internal_error("Error fetching events", e) from e
    return EventsResponse(events=[EventItem.model_validate(e) for e in rows])


@router.post("/add-event")
async def add_event(
    ctx: Annotated[AppContext, Depends(get_context)],
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
    title: Annotated[str, Form(min_length=1, max_length=255)],
    description: Annotated[str, Form()] = "",
    image: Annotated[UploadFile | None, File()] = None,
) -> RedirectResponse:
    """
    Create an event with an optional image, then redirect to /events.
    When a user is signed in they are recorded as the organizer.
    """
    image_url = None
    if has_content(image):
        try:
            image_url = "/uploads/" + await ctx.storage.save("image", image)
        except UploadTooLargeError as e:
            raise HTTPException(status_code=413, detail=e.message) from e
        except OSError as e:
            raise internal_error("Error storing event image", e) from e

    try:
        await create_event(
            db,
            title=title,
            description=description,
            image_url=image_url,
            organizer_id=user.id if user is not None else None,
        )
    except CredentialStoreError as e:
        raise internal_error("Error adding event", e) from e
    return redirect("/events")
