"""Credential store: user lookups and inserts over the users table."""

import logging
from collections.abc import Callable
from typing import TypeVar

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stagefront.models import User
from stagefront.schemas.auth import RegistrationData

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CredentialStoreError(Exception):
    """Raised when the database cannot complete a query (unreachable, bad SQL, ...)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class EmailAlreadyRegisteredError(Exception):
    """Raised when the UNIQUE constraint on users.email rejects an insert."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email already registered")


async def run_query(db: Session, operation: str, fn: Callable[[], T]) -> T:
    """
    Run a blocking query in the threadpool. SQLAlchemy errors roll the session
    back and surface as CredentialStoreError.
    """
    try:
        return await run_in_threadpool(fn)
    except SQLAlchemyError as e:
        try:
            await run_in_threadpool(db.rollback)
        except SQLAlchemyError:
            logger.warning("Rollback failed after %s error", operation, exc_info=True)
        raise CredentialStoreError(f"Database error during {operation}.", cause=e) from e


async def find_user_by_email(db: Session, email: str) -> User | None:
    """Exact, case-sensitive email match."""
    return await run_query(
        db,
        "user lookup by email",
        lambda: db.query(User).filter(User.email == email).first(),
    )


async def find_user_by_id(db: Session, user_id: int) -> User | None:
    return await run_query(db, "user lookup by id", lambda: db.get(User, user_id))


async def insert_user(db: Session, data: RegistrationData, password_hash: str) -> User:
    """
    Insert a new user and return the refreshed row.
    Raises EmailAlreadyRegisteredError when another row already holds the email.
    """
    user = User(
        email=data.email,
        password_hash=password_hash,
        name=data.name,
        role=data.role,
        description=data.description,
        instrument=data.instrument,
        profile_picture=data.profile_picture,
        video=data.video,
        audio=data.audio,
    )

    def _insert() -> User:
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    try:
        return await run_query(db, "user insert", _insert)
    except CredentialStoreError as e:
        if isinstance(e.cause, IntegrityError):
            logger.info("Registration lost a race on a duplicate email; treating as existing account")
            raise EmailAlreadyRegisteredError(data.email) from e.cause
        raise
