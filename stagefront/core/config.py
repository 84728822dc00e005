"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
    "sqlite://",
)


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False

    # Postgres connection parameters; DATABASE_URL takes precedence when set.
    PG_USER: str = "postgres"
    PG_PASSWORD: SecretStr = SecretStr("postgres")
    PG_HOST: str = "localhost"
    PG_PORT: int = 5432
    PG_DATABASE: str = "stagefront"
    DATABASE_URL: str | None = None

    # Signed session cookie. Rotating the secret invalidates every session.
    # Unset in dev: a random per-process secret is used, so a restart signs everyone out.
    # Required in prod.
    SESSION_SECRET: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("SESSION_SECRET", "SECRET"),
    )
    SESSION_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "stagefront_session"
    SESSION_EXPIRE_MINUTES: int = 60 * 24
    SESSION_COOKIE_SECURE: bool = False

    BCRYPT_ROUNDS: int = 10

    # Media uploads (profile pictures, videos, audio, event images)
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 100 * 1024 * 1024
    # Delete media stored for a registration that did not create a user.
    UPLOAD_CLEANUP_ON_FAILURE: bool = True

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not any(v.strip().startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL (e.g. postgresql:// or postgresql+psycopg2://)"
            )
        return v.strip()

    @field_validator("PG_PORT")
    @classmethod
    def validate_pg_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("PG_PORT must be between 1 and 65535")
        return v

    @field_validator("SESSION_SECRET")
    @classmethod
    def validate_session_secret(cls, v: SecretStr | None) -> SecretStr | None:
        if v is None:
            return None
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("SESSION_SECRET must be set and non-empty")
        return v

    @field_validator("SESSION_ALGORITHM", "SESSION_COOKIE_NAME")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must be set and non-empty")
        return v.strip()

    @field_validator("SESSION_EXPIRE_MINUTES")
    @classmethod
    def validate_session_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 43200:
            raise ValueError(
                "SESSION_EXPIRE_MINUTES must be between 1 and 43200 (1 min to 30 days)"
            )
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("MAX_UPLOAD_BYTES")
    @classmethod
    def validate_max_upload_bytes(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MAX_UPLOAD_BYTES must be positive")
        return v

    @model_validator(mode="after")
    def require_secret_in_prod(self) -> "Settings":
        if self.APP_ENV == "prod" and self.SESSION_SECRET is None:
            raise ValueError("SESSION_SECRET (or SECRET) must be set when APP_ENV=prod")
        return self

    @property
    def database_url(self) -> str | URL:
        """Explicit DATABASE_URL, or a psycopg2 URL assembled from the PG_* parameters."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+psycopg2",
            username=self.PG_USER,
            password=self.PG_PASSWORD.get_secret_value(),
            host=self.PG_HOST,
            port=self.PG_PORT,
            database=self.PG_DATABASE,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
