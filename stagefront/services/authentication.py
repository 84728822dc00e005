"""Email/password authentication strategy against the credential store."""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from stagefront.core.security import PasswordHasher
from stagefront.models import User
from stagefront.services.credentials import find_user_by_email

logger = logging.getLogger(__name__)

REASON_NO_SUCH_USER = "no such user"
REASON_BAD_CREDENTIALS = "bad credentials"
REASON_MISSING_CREDENTIALS = "missing credentials"


class AuthStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class AuthOutcome:
    """
    Result of one authentication attempt. Failures keep an internal reason;
    clients see the same redirect for every failure.
    """

    status: AuthStatus
    user: User | None = None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is AuthStatus.SUCCESS

    @classmethod
    def success(cls, user: User) -> "AuthOutcome":
        return cls(status=AuthStatus.SUCCESS, user=user)

    @classmethod
    def failure(cls, reason: str) -> "AuthOutcome":
        return cls(status=AuthStatus.FAILURE, reason=reason)


async def authenticate(
    db: Session,
    hasher: PasswordHasher,
    email: str,
    password: str,
) -> AuthOutcome:
    """
    Check an (email, password) pair.

    Unknown email and wrong password are both FAILURE outcomes. Store or
    hasher malfunctions raise (CredentialStoreError, PasswordHashError) and
    must become a 5xx, never a failed login.
    """
    if not email or not password:
        return AuthOutcome.failure(REASON_MISSING_CREDENTIALS)

    user = await find_user_by_email(db, email)
    if user is None:
        await hasher.verify_dummy(password)
        logger.info("Login failed", extra={"reason": REASON_NO_SUCH_USER})
        return AuthOutcome.failure(REASON_NO_SUCH_USER)

    if not await hasher.verify(password, user.password_hash):
        logger.info("Login failed", extra={"reason": REASON_BAD_CREDENTIALS, "user_id": user.id})
        return AuthOutcome.failure(REASON_BAD_CREDENTIALS)

    logger.info("Login succeeded", extra={"user_id": user.id})
    return AuthOutcome.success(user)
