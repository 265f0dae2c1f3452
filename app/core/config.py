"""Application configuration from environment variables."""

import re
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str | int) -> int:
    """Parse ``86400``, ``"86400"``, ``"30m"``, ``"24h"`` or ``"7d"`` into seconds."""
    if isinstance(value, int):
        seconds = value
    else:
        match = _DURATION_RE.match(str(value))
        if not match:
            raise ValueError(f"Invalid duration: {value!r} (expected e.g. 3600, 30m, 24h, 7d)")
        seconds = int(match.group(1)) * _DURATION_UNITS[match.group(2).lower()]
    if seconds <= 0:
        raise ValueError("Duration must be positive")
    return seconds


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = "CryptoHub Auth API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 5000

    # API
    api_prefix: str = "/api"

    # Database (PostgreSQL); DATABASE_URL, when set, wins over the parts below
    database_url_override: str = Field(
        default="", validation_alias=AliasChoices("database_url", "database_url_override")
    )
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "postgres"
    database_password: str = ""  # Set in .env - never commit
    database_name: str = "cryptohub"
    database_ssl_mode: str = "disable"

    # Pool
    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_pool_timeout: float = 2.0
    database_pool_recycle: int = 1800

    # Startup connectivity check
    database_connect_retries: int = 10
    database_connect_retry_delay: float = 0.1

    # Create tables on startup (dev/test only; use Alembic in production)
    database_create_all: bool = False

    # Tokens
    jwt_secret: str = ""  # Required; startup fails without it
    jwt_expires_in: int = 24 * 3600
    jwt_algorithm: str = "HS256"

    # Passwords
    password_bcrypt_rounds: int = 12

    # CORS: comma-separated list of allowed origins outside development
    cors_origins: str = ""

    @field_validator("jwt_expires_in", mode="before")
    @classmethod
    def _parse_jwt_expires_in(cls, v):
        return parse_duration(v)

    @field_validator("jwt_secret", mode="before")
    @classmethod
    def _strip_secret(cls, v):
        return (v or "").strip()

    def _build_db_url(self, scheme: str = "postgresql", ssl_query: str = "sslmode=require") -> str:
        user = quote_plus(self.database_user)
        password = quote_plus(self.database_password)
        return (
            f"{scheme}://{user}:{password}@{self.database_host}:{self.database_port}"
            f"/{self.database_name}?{ssl_query}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")

    @property
    def database_url(self) -> str:
        """Driverless URL; Alembic renders offline SQL from it."""
        if self.database_url_override:
            return self.database_url_override.replace("+asyncpg", "").replace("+aiosqlite", "")
        return self._build_db_url(scheme="postgresql", ssl_query=f"sslmode={self.database_ssl_mode}")

    @property
    def async_database_url(self) -> str:
        """Async URL for FastAPI (asyncpg driver)."""
        if self.database_url_override:
            url = self.database_url_override
            if url.startswith("postgresql://"):
                url = "postgresql+asyncpg://" + url[len("postgresql://"):]
            elif url.startswith("sqlite:///"):
                url = "sqlite+aiosqlite:///" + url[len("sqlite:///"):]
            return url
        ssl = "require" if self.database_ssl_mode in ("require", "verify-ca", "verify-full") else "disable"
        return self._build_db_url(scheme="postgresql+asyncpg", ssl_query=f"ssl={ssl}")

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
