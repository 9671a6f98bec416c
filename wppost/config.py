"""
Configuration module for wppost.

Centralized configuration management using Pydantic settings.
All configuration values can be overridden via environment variables or .env file.
"""

import re
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TABLE_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


class Settings(BaseSettings):
    """
    Settings for the post model and its content hosts.

    Attributes:
        CONTENT_HOST: Which host backs Post classes by default (database or rest)
        DATABASE_URL: SQLAlchemy URL of the WordPress database
        DB_TABLE_PREFIX: WordPress table prefix ($table_prefix in wp-config.php)
        DB_ECHO: Echo SQL statements (debugging only)
        WP_BASE_URL: Site URL used by the REST host
        WP_USERNAME: User for application-password authentication
        WP_APP_PASSWORD: Application password for the REST host
        REQUEST_TIMEOUT: Timeout for REST requests in seconds
        MAX_RETRIES: Retry attempts for idempotent REST reads
        TAG_CACHE_TTL: Lifetime of cached tag name lookups in seconds
        DEFAULT_POSTS_PER_PAGE: Page size used by Post.get_posts
        DEFAULT_ORDER: Sort direction used by Post.get_posts
        DEFAULT_DATE_FORMAT: PHP date format used when the site has none
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_JSON: Render logs as JSON instead of console output
    """

    # Host selection
    CONTENT_HOST: Literal["database", "rest"] = Field(
        default="database",
        description="Default content host backend",
    )

    # Database host
    DATABASE_URL: str = Field(
        default="sqlite:///./wordpress.sqlite",
        description="SQLAlchemy URL of the WordPress database",
    )
    DB_TABLE_PREFIX: str = Field(
        default="wp_",
        description="WordPress table prefix",
    )
    DB_ECHO: bool = Field(
        default=False,
        description="Echo SQL statements",
    )

    # REST host
    WP_BASE_URL: Optional[str] = Field(
        default=None,
        description="WordPress site URL for the REST host",
    )
    WP_USERNAME: Optional[str] = Field(
        default=None,
        description="WordPress user for application-password auth",
    )
    WP_APP_PASSWORD: Optional[str] = Field(
        default=None,
        description="WordPress application password",
    )
    REQUEST_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        le=60.0,
        description="Timeout for REST requests in seconds",
    )
    MAX_RETRIES: int = Field(
        default=3,
        ge=0,
        le=5,
        description="Retry attempts for idempotent REST reads",
    )
    TAG_CACHE_TTL: int = Field(
        default=300,
        ge=0,
        description="Lifetime of cached tag lookups in seconds",
    )

    # Query defaults
    DEFAULT_POSTS_PER_PAGE: int = Field(
        default=10,
        ge=-1,
        description="Page size used by Post.get_posts",
    )
    DEFAULT_ORDER: Literal["ASC", "DESC"] = Field(
        default="DESC",
        description="Sort direction used by Post.get_posts",
    )
    DEFAULT_DATE_FORMAT: str = Field(
        default="F j, Y",
        description="PHP date format used when the site option is missing",
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("WP_BASE_URL")
    @classmethod
    def validate_url(cls, value: Optional[str]) -> Optional[str]:
        """
        Validate that the site URL is properly formatted.

        Args:
            value: The URL to validate

        Returns:
            The validated URL without trailing slash

        Raises:
            ValueError: If URL is invalid
        """
        if value is None or value == "":
            return None

        value = value.rstrip("/")

        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(f"Site URL must start with http:// or https://, got: {value}")

        return value

    @field_validator("DB_TABLE_PREFIX")
    @classmethod
    def validate_table_prefix(cls, value: str) -> str:
        """Table prefixes may only hold letters, digits and underscores."""
        if not TABLE_PREFIX_PATTERN.match(value):
            raise ValueError(f"Invalid table prefix: {value!r}")
        return value


@lru_cache
def get_settings() -> Settings:
    """
    Get the cached settings instance.

    Returns:
        Settings loaded from the environment
    """
    return Settings()


# Global settings instance
settings = get_settings()
