"""
Application Configuration Module

Pydantic Settings for type-safe configuration management.

Values are read from environment variables (case-insensitive) and fall
back to a local .env file, then to the defaults below. Validation runs at
startup, so a bad LOG_LEVEL or ENVIRONMENT fails fast instead of at the
first request.

Usage:
    from bookstore.config import get_settings

    settings = get_settings()
    print(settings.database_url)
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Tests build their own instance (``Settings(database_url=...)``) and hand
    it to ``create_app`` instead of going through the cached accessor.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Bookstore Catalog API",
        description="Application name displayed in docs and logs"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (SQL echo, store error details in 500 bodies)"
    )
    api_version: str = Field(
        default="v1",
        description="API version for URL routing"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )
    port: int = Field(
        default=4000,
        description="Port to bind the server to"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # -------------------------------------------------------------------------
    # Database Settings
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="postgresql://localhost:5432/bookstore",
        description="SQLAlchemy connection URL for the catalog store"
    )
    db_pool_size: int = Field(
        default=5,
        description="Number of permanent database connections (ignored for SQLite)"
    )
    db_max_overflow: int = Field(
        default=10,
        description="Maximum additional connections during high load (ignored for SQLite)"
    )
    db_connect_timeout: int = Field(
        default=10,
        ge=1,
        description="Seconds to wait for the database before giving up"
    )
    db_create_tables: bool = Field(
        default=True,
        description="Create the catalog table on startup if it does not exist"
    )

    # -------------------------------------------------------------------------
    # HTTP Settings
    # -------------------------------------------------------------------------
    allowed_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # -------------------------------------------------------------------------
    # Logging Settings
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def api_prefix(self) -> str:
        """URL prefix shared by all versioned routers."""
        return f"/api/{self.api_version}"

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate that log_level is a valid Python logging level.

        Returns:
            The validated value (uppercase)

        Raises:
            ValueError: If log level is invalid
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}")
        return v.lower()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    The first call reads the environment and .env file; later calls return
    the same instance.
    """
    return Settings()
