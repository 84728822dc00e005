"""Registration flow: uniqueness check, hashing, insert."""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from stagefront.core.security import PasswordHasher
from stagefront.models import User
from stagefront.schemas.auth import RegistrationData
from stagefront.services.credentials import (
    EmailAlreadyRegisteredError,
    find_user_by_email,
    insert_user,
)

logger = logging.getLogger(__name__)


class RegistrationStatus(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class RegistrationOutcome:
    status: RegistrationStatus
    user: User | None = None

    @property
    def created(self) -> bool:
        return self.status is RegistrationStatus.CREATED


async def register(
    db: Session,
    hasher: PasswordHasher,
    data: RegistrationData,
) -> RegistrationOutcome:
    """
    Create a user unless the email is taken.

    The existence check and the insert are not atomic; a concurrent
    registration that slips past the check is caught by the UNIQUE constraint
    and also reported as ALREADY_EXISTS. Store and hasher failures raise.
    """
    if await find_user_by_email(db, data.email) is not None:
        logger.info("Registration skipped: email already registered")
        return RegistrationOutcome(status=RegistrationStatus.ALREADY_EXISTS)

    password_hash = await hasher.hash(data.password)
    try:
        user = await insert_user(db, data, password_hash)
    except EmailAlreadyRegisteredError:
        return RegistrationOutcome(status=RegistrationStatus.ALREADY_EXISTS)

    logger.info("Registered user", extra={"user_id": user.id, "role": user.role})
    return RegistrationOutcome(status=RegistrationStatus.CREATED, user=user)
