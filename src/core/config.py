"""Application configuration loaded from environment variables.

Settings are read once per process via get_settings() and passed explicitly
to the token issuer, the database engine and the managers.
"""

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

try:
    APP_VERSION = version("shorturl-accounts")
except PackageNotFoundError:
    # Running from a checkout that was never installed
    APP_VERSION = "0.0.0+local"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # Process
    port: int = 3000
    log_level: str = "INFO"

    # Database: DB_URL is the server (or SQLite directory), DB_NAME the database
    db_url: str = "sqlite+aiosqlite:///./data"
    db_name: str = "shorturl"

    # Session tokens
    jwt_key: str = "dev-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    # None keeps tokens valid until the key rotates
    access_token_expire_minutes: int | None = None

    # Links embedded in mails and redirects
    api_url: str = "http://localhost:3000"
    frontend_url: str = "https://ui-short-url.netlify.app"
    cors_origins: list[str] = ["*"]

    # Short links
    short_code_length: int = 8
    short_code_max_attempts: int = 5

    # Mail
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    email_from: str = "noreply@shorturl.local"

    @field_validator("db_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs need the asyncpg driver prefix."""
        if isinstance(v, str):
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+asyncpg://", 1)
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @property
    def database_url(self) -> str:
        """Full SQLAlchemy URL built from DB_URL and DB_NAME."""
        base = self.db_url.rstrip("/")
        if base.startswith("sqlite"):
            return f"{base}/{self.db_name}.db"
        return f"{base}/{self.db_name}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
