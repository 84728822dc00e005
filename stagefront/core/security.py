"""Password hashing and signed session cookies for authentication."""

import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from fastapi.concurrency import run_in_threadpool

from stagefront.core.config import Settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of the input.
BCRYPT_MAX_BYTES = 72


class PasswordHashError(Exception):
    """Raised when the hashing primitive fails (e.g. a malformed stored hash)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def _encode(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """
    Salted bcrypt hashing. Hash and verify run in the threadpool so a slow
    bcrypt round never stalls other requests on the event loop.
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        self._dummy_hash: str | None = None

    @property
    def dummy_hash(self) -> str:
        """Hash of a random throwaway password, verified against when no user matches."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash_sync(secrets.token_urlsafe(16))
        return self._dummy_hash

    def hash_sync(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_encode(plain_password), salt).decode("utf-8")
        except (ValueError, TypeError) as e:
            raise PasswordHashError("Password hashing failed.", cause=e) from e

    def verify_sync(self, plain_password: str, hashed: str) -> bool:
        """
        Verify a plain password against a stored hash.
        A hash bcrypt cannot parse raises PasswordHashError; it is not a mismatch.
        """
        try:
            return bcrypt.checkpw(_encode(plain_password), hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError) as e:
            raise PasswordHashError("Stored password hash is malformed.", cause=e) from e

    async def hash(self, plain_password: str) -> str:
        return await run_in_threadpool(self.hash_sync, plain_password)

    async def verify(self, plain_password: str, hashed: str) -> bool:
        return await run_in_threadpool(self.verify_sync, plain_password, hashed)

    async def verify_dummy(self, plain_password: str) -> None:
        """Spend one bcrypt check so an unknown account costs as much as a wrong password."""
        await run_in_threadpool(lambda: self.verify_sync(plain_password, self.dummy_hash))


class SessionSigner:
    """Sign and read the session cookie: a JWT whose sub is the user id."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 1440) -> None:
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionSigner":
        if settings.SESSION_SECRET is None:
            logger.warning(
                "SESSION_SECRET is not set; using a random per-process secret. "
                "Sessions will not survive a restart."
            )
            secret = secrets.token_urlsafe(32)
        else:
            secret = settings.SESSION_SECRET.get_secret_value()
        return cls(
            secret,
            algorithm=settings.SESSION_ALGORITHM,
            expire_minutes=settings.SESSION_EXPIRE_MINUTES,
        )

    @property
    def max_age_seconds(self) -> int:
        return self.expire_minutes * 60

    def dump(self, principal: int) -> str:
        """Create a signed session token carrying only the principal (user id)."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(principal),
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def load(self, token: str | None) -> int | None:
        """
        Return the principal from a session token, or None when the token is
        missing, tampered with, expired, or signed with another secret.
        """
        if not token:
            return None
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            return None
        try:
            return int(payload.get("sub"))
        except (TypeError, ValueError):
            return None
