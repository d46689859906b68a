"""Configuration management for the ClassBeyond badge engine
- Handles environment variables and application settings.
"""

import os
from typing import Literal
from urllib.parse import urlparse
from zoneinfo import ZoneInfo

from pydantic import ConfigDict, model_validator
from pydantic_settings import BaseSettings

DatabaseType = Literal["sqlite", "postgresql"]
EmailProviderType = Literal["console", "resend"]


class Settings(BaseSettings):
    """Application settings with env variable support"""

    # Database Config
    DATABASE_URL: str = "sqlite://classbeyond.db"
    DATABASE_TYPE: DatabaseType | None = None

    # Postgres Config
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "classbeyond"

    # SQLite Config
    SQLITE_DB_PATH: str = "classbeyond.db"

    # Database Connection settings
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_PRE_PING: bool = True

    # Application Config
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    APP_URL: str = "http://localhost:8000"

    # Badge Config
    # Local time zone used for time-of-day and weekend rules
    TIMEZONE: str = "UTC"
    BADGE_DEFINITIONS_PATH: str | None = None  # defaults to the bundled badges.yaml

    # Email Config
    EMAIL_PROVIDER: EmailProviderType = "console"
    RESEND_API_KEY: str = ""
    EMAIL_FROM_NAME: str = "ClassBeyond"
    EMAIL_FROM_ADDRESS: str = "noreply@classbeyond.app"

    # Development Config
    RELOAD: bool = True
    LOG_LEVEL: str = "debug"

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    @model_validator(mode="after")
    def validate_model(self):
        """Post initialization hook using Pydantic v2 model validator"""
        if not self.DATABASE_TYPE:
            self.DATABASE_TYPE = self._detect_database_type()  # pylint: disable=C0103
        return self

    def _detect_database_type(self) -> DatabaseType:
        """Detect the database type from the DATABASE_URL"""
        parsed = urlparse(self.DATABASE_URL)
        scheme = parsed.scheme.lower()

        if scheme.startswith("sqlite"):
            return "sqlite"
        if scheme.startswith(("postgresql", "postgres")):
            return "postgresql"
        return "sqlite"

    @property
    def tzinfo(self) -> ZoneInfo:
        """Local time zone for badge rules"""
        return ZoneInfo(self.TIMEZONE)

    def get_database_url(self) -> str:
        """Get the formatted database URL"""

        if self.DATABASE_TYPE == "sqlite":
            return self._get_sqlite_url()
        elif self.DATABASE_TYPE == "postgresql":
            return self._get_postgresql_url()
        else:
            return self.DATABASE_URL

    def _get_sqlite_url(self) -> str:
        """Get the SQLite database URL"""
        if self.DATABASE_URL.startswith("sqlite"):
            if ":///" in self.DATABASE_URL:
                return self.DATABASE_URL
            db_path = self.DATABASE_URL.replace("sqlite://", "")
            return f"sqlite:///{os.path.abspath(db_path)}"
        return f"sqlite:///{os.path.abspath(self.SQLITE_DB_PATH)}"

    def _get_postgresql_url(self) -> str:
        """Get the PostgreSQL database URL"""
        if (
            self.DATABASE_URL.startswith(("postgresql", "postgres"))
            and "localhost" not in self.DATABASE_URL
        ):
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    def get_database_config(self) -> dict:
        """Get the database specific configuration"""
        base_config = {"echo": self.DB_ECHO}
        if self.DATABASE_TYPE == "sqlite":
            base_config.update(
                {
                    "connect_args": {"check_same_thread": False},
                    "pool_pre_ping": self.DB_POOL_PRE_PING,
                    "pool_recycle": 3600,  # 1hr
                }
            )
        elif self.DATABASE_TYPE == "postgresql":
            base_config.update(
                {
                    "pool_size": self.DB_POOL_SIZE,
                    "max_overflow": self.DB_MAX_OVERFLOW,
                    "pool_timeout": self.DB_POOL_TIMEOUT,
                    "pool_pre_ping": self.DB_POOL_PRE_PING,
                }
            )
        return base_config


# Global settings instance
settings = Settings()

if settings.DATABASE_TYPE not in ["sqlite", "postgresql"]:
    raise ValueError(f"🚨 Unsupported database type: {settings.DATABASE_TYPE}")

if settings.EMAIL_PROVIDER == "resend" and not settings.RESEND_API_KEY:
    if not settings.DEBUG:
        raise ValueError("🚨 RESEND_API_KEY is not set in production")
    print("⚠️ Warning: EMAIL_PROVIDER is resend but RESEND_API_KEY is empty")
