"""Role-based profile endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from stagefront.api.v1.auth import internal_error, require_user
from stagefront.core.database import get_db
from stagefront.models import User
from stagefront.schemas.profile import ProfileView
from stagefront.services.credentials import CredentialStoreError
from stagefront.services.profile import ProfileNotFoundError, resolve_profile

router = APIRouter()


@router.get("/profile", response_model=ProfileView)
async def get_profile(
    user: Annotated[User, Depends(require_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileView:
    """
    Profile of the signed-in user. The 'view' field names the template:
    musician, band (with the user's bands) or organizer (with their events).
    Without a session this redirects to /login; roles with no view are 404.
    """
    try:
        return await resolve_profile(db, user)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail="Profile not found") from e
    except CredentialStoreError as e:
        raise internal_error("Error fetching profile", e) from e
