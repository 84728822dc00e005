"""Application context: every shared resource, built once at startup and passed explicitly."""

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from stagefront.core.config import Settings
from stagefront.core.database import create_db_engine, create_session_factory
from stagefront.core.security import PasswordHasher, SessionSigner
from stagefront.storage.local_storage import LocalStorage


@dataclass
class AppContext:
    """Storage handle, password hasher, session signer and media storage for one process."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    hasher: PasswordHasher
    signer: SessionSigner
    storage: LocalStorage

    def close(self) -> None:
        """Release pooled database connections (called at shutdown)."""
        self.engine.dispose()


def build_context(settings: Settings, engine: Engine | None = None) -> AppContext:
    """Create the context from settings; pass an engine to reuse an existing pool."""
    if engine is None:
        engine = create_db_engine(settings)
    storage = LocalStorage(settings.UPLOAD_DIR, max_bytes=settings.MAX_UPLOAD_BYTES)
    storage.ensure_directories()
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        signer=SessionSigner.from_settings(settings),
        storage=storage,
    )


def get_context(request: Request) -> AppContext:
    """Dependency: the context attached to the running app."""
    return request.app.state.context
