"""
DualStore — Application Configuration
=======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file, or a
       secrets directory), validates types/ranges, and provides a singleton
       `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Secrets directory:
    When CONFIG_DIRECTORY is set, every variable may also be supplied as a file
    named after the variable inside that directory (e.g. /run/secrets/POSTGRES_PASSWORD).
    A value found in the directory wins over the environment variable.
    A missing file simply falls back to the environment.
"""

import os
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Variable names follow the docker-compose conventions of the official
    postgres and mongo images, so the same .env feeds both the containers and the API.
    """

    # ── PostgreSQL ────────────────────────────────────────────────────────
    postgres_user: str = Field(default="postgres")
    postgres_password: str = Field(default="postgres")
    # Host name only; kept as POSTGRES_URL for compatibility with existing deployments
    postgres_url: str = Field(default="localhost")
    postgres_port: int = Field(default=5432, ge=1, le=65535)
    postgres_db: str = Field(default="postgres")

    # Full URL override, e.g. postgresql+asyncpg://user:pw@db:5432/customers
    database_url: Optional[str] = Field(default=None)

    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── MongoDB ───────────────────────────────────────────────────────────
    mongodb_username: str = Field(
        default="root",
        validation_alias=AliasChoices("mongodb_username", "me_config_mongodb_adminusername"),
    )
    mongodb_password: str = Field(
        default="example",
        validation_alias=AliasChoices("mongodb_password", "me_config_mongodb_adminpassword"),
    )
    mongodb_server: str = Field(
        default="localhost:27017",
        validation_alias=AliasChoices("mongodb_server", "me_config_mongodb_server"),
    )
    mongodb_url: Optional[str] = Field(default=None)
    mongodb_database: str = Field(
        default="dualstore",
        validation_alias=AliasChoices("mongodb_database", "mongo_initdb_database"),
    )
    mongodb_order_collection: str = Field(
        default="orders",
        validation_alias=AliasChoices("mongodb_order_collection", "mongodb_note_collection"),
    )
    mongo_timeout_ms: int = Field(default=5000, ge=100, le=60000)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:8000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        # Secrets directory first: a value mounted as a file overrides the environment
        return init_settings, file_secret_settings, env_settings, dotenv_settings

    # ── Derived connection strings ────────────────────────────────────────

    @property
    def sqlalchemy_database_url(self) -> str:
        """
        What: Async SQLAlchemy URL for the customer database.
        How:  DATABASE_URL wins; otherwise assembled from the POSTGRES_* parts.
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{quote_plus(self.postgres_user)}:"
            f"{quote_plus(self.postgres_password)}@{self.postgres_url}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def mongodb_uri(self) -> str:
        """MongoDB connection URI; MONGODB_URL wins over the ME_CONFIG_* parts."""
        if self.mongodb_url:
            return self.mongodb_url
        return (
            f"mongodb://{quote_plus(self.mongodb_username)}:"
            f"{quote_plus(self.mongodb_password)}@{self.mongodb_server}/"
        )


def load_settings(secrets_dir: Optional[str] = None) -> Settings:
    """
    Build a Settings instance, honouring CONFIG_DIRECTORY as a secrets directory.

    Why a function: tests build isolated instances against temporary directories
    without touching the module-level singleton.
    """
    secrets_dir = secrets_dir or os.environ.get("CONFIG_DIRECTORY") or None
    if secrets_dir and os.path.isdir(secrets_dir):
        return Settings(_secrets_dir=secrets_dir)
    return Settings()


# Singleton instance — imported throughout the application
settings = load_settings()
