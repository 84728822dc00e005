"""Session login, registration, logout, and the dependencies that resolve the signed-in user."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from stagefront.core.context import AppContext, get_context
from stagefront.core.database import get_db
from stagefront.core.security import PasswordHashError
from stagefront.models import User
from stagefront.schemas.auth import FormDescriptor, FormField, RegistrationData
from stagefront.schemas.profile import Role
from stagefront.services.authentication import authenticate
from stagefront.services.credentials import CredentialStoreError
from stagefront.services.principal import from_principal, to_principal
from stagefront.services.registration import register as register_user
from stagefront.storage.local_storage import UploadTooLargeError, has_content

logger = logging.getLogger(__name__)
router = APIRouter()

MEDIA_FIELDS = ("profile_picture", "video", "audio")


class NotAuthenticatedError(Exception):
    """Raised by require_user when the request carries no valid session principal."""


def internal_error(message: str, e: Exception) -> HTTPException:
    """Log an internal failure with context and return a generic 500 for the client."""
    logger.error(
        message,
        exc_info=e,
        extra={"error_type": type(e).__name__, "reason": getattr(e, "message", str(e))[:500]},
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal Server Error",
    )


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def start_session(response: RedirectResponse, ctx: AppContext, user: User) -> None:
    """Attach the signed principal cookie for user to response."""
    response.set_cookie(
        key=ctx.settings.SESSION_COOKIE_NAME,
        value=ctx.signer.dump(to_principal(user)),
        max_age=ctx.signer.max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=ctx.settings.SESSION_COOKIE_SECURE,
    )


async def get_optional_user(
    request: Request,
    ctx: Annotated[AppContext, Depends(get_context)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """
    Dependency: resolve the session cookie to a user, or None.
    A principal whose user row no longer exists counts as signed out.
    """
    principal = ctx.signer.load(request.cookies.get(ctx.settings.SESSION_COOKIE_NAME))
    user = None
    if principal is not None:
        try:
            user = await from_principal(db, principal)
        except CredentialStoreError as e:
            raise internal_error("Error resolving session user", e) from e
    request.state.user = user
    return user


async def require_user(
    request: Request,
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Dependency: the signed-in user. Raises NotAuthenticatedError (redirect to /login) otherwise."""
    if not is_authenticated(request):
        raise NotAuthenticatedError()
    return user


def is_authenticated(request: Request) -> bool:
    """True iff a session principal was resolved for this request."""
    return getattr(request.state, "user", None) is not None


@router.get("/login", response_model=FormDescriptor)
def login_form() -> FormDescriptor:
    return FormDescriptor(
        action="/login",
        fields=[
            FormField(name="username", type="email", required=True),
            FormField(name="password", type="password", required=True),
        ],
    )


@router.get("/register", response_model=FormDescriptor)
def register_form() -> FormDescriptor:
    return FormDescriptor(
        action="/register",
        enctype="multipart/form-data",
        fields=[
            FormField(name="username", type="email", required=True),
            FormField(name="password", type="password", required=True),
            FormField(name="name", type="text", required=True),
            FormField(name="role", type="select", required=True, options=[r.value for r in Role]),
            FormField(name="description", type="textarea"),
            FormField(name="instrument", type="text"),
            FormField(name="profile_picture", type="file"),
            FormField(name="video", type="file"),
            FormField(name="audio", type="file"),
        ],
    )


@router.post("/login")
async def login(
    ctx: Annotated[AppContext, Depends(get_context)],
    db: Annotated[Session, Depends(get_db)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> RedirectResponse:
    """
    Authenticate with email (form field 'username') and password.
    Success sets the session cookie and redirects to /profile; any failed
    attempt redirects back to /login without saying why.
    """
    try:
        outcome = await authenticate(db, ctx.hasher, username, password)
    except (CredentialStoreError, PasswordHashError) as e:
        raise internal_error("Error during login verification", e) from e

    if not outcome.succeeded:
        return redirect("/login")
    response = redirect("/profile")
    start_session(response, ctx, outcome.user)
    return response


def _discard_media(ctx: AppContext, paths: list[str]) -> None:
    if not ctx.settings.UPLOAD_CLEANUP_ON_FAILURE:
        return
    for path in paths:
        try:
            ctx.storage.delete(path)
        except OSError:
            logger.warning("Could not delete orphaned upload", extra={"path": path}, exc_info=True)


@router.post("/register")
async def register(
    ctx: Annotated[AppContext, Depends(get_context)],
    db: Annotated[Session, Depends(get_db)],
    username: Annotated[str, Form()],
    password: Annotated[str, Form()],
    role: Annotated[str, Form()],
    name: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    instrument: Annotated[str | None, Form()] = None,
    profile_picture: Annotated[UploadFile | None, File()] = None,
    video: Annotated[UploadFile | None, File()] = None,
    audio: Annotated[UploadFile | None, File()] = None,
) -> RedirectResponse:
    """
    Create an account with optional media and sign it in.

    An email that is already registered redirects to /login with no message.
    Media stored for a registration that created no user is deleted unless
    UPLOAD_CLEANUP_ON_FAILURE is off.
    """
    try:
        data = RegistrationData(
            email=username,
            password=password,
            name=name,
            role=role,
            description=description,
            instrument=instrument or None,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_input=False)) from e

    stored: dict[str, str] = {}
    uploads = dict(zip(MEDIA_FIELDS, (profile_picture, video, audio)))
    try:
        for field, upload in uploads.items():
            if has_content(upload):
                stored[field] = await ctx.storage.save(field, upload)
    except UploadTooLargeError as e:
        _discard_media(ctx, list(stored.values()))
        raise HTTPException(status_code=413, detail=e.message) from e
    except OSError as e:
        _discard_media(ctx, list(stored.values()))
        raise internal_error("Error storing registration media", e) from e
    data = data.model_copy(update=stored)

    try:
        outcome = await register_user(db, ctx.hasher, data)
    except (CredentialStoreError, PasswordHashError) as e:
        _discard_media(ctx, data.media_paths())
        raise internal_error("Error registering user", e) from e

    if not outcome.created:
        _discard_media(ctx, data.media_paths())
        return redirect("/login")
    response = redirect("/profile")
    start_session(response, ctx, outcome.user)
    return response


@router.get("/logout")
def logout(ctx: Annotated[AppContext, Depends(get_context)]) -> RedirectResponse:
    """Drop the session cookie and go home."""
    response = redirect("/")
    response.delete_cookie(
        key=ctx.settings.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=ctx.settings.SESSION_COOKIE_SECURE,
    )
    return response
