"""
Content hosts.

A host is where posts actually live: a WordPress database reached through
SQLAlchemy, or a live site reached through the REST API.
"""

from typing import Optional

import structlog

from ..config import settings
from ..database import create_db_engine, create_session_factory
from ..domain.exceptions import HostConfigurationException
from ..logging_config import setup_logging
from .base import ContentHost
from .database import DatabaseContentHost
from .rest import WordPressRestHost

logger = structlog.get_logger(__name__)

# Global default host instance
_default_host: Optional[ContentHost] = None


def create_host_from_settings() -> ContentHost:
    """
    Build the host selected by CONTENT_HOST.

    Returns:
        A database or REST host configured from settings

    Raises:
        HostConfigurationException: If the REST host has no WP_BASE_URL
    """
    if settings.CONTENT_HOST == "rest":
        if not settings.WP_BASE_URL:
            raise HostConfigurationException(
                "WP_BASE_URL", "required when CONTENT_HOST is 'rest'"
            )
        return WordPressRestHost(
            base_url=settings.WP_BASE_URL,
            username=settings.WP_USERNAME,
            app_password=settings.WP_APP_PASSWORD,
            timeout=settings.REQUEST_TIMEOUT,
            max_retries=settings.MAX_RETRIES,
            tag_cache_ttl=settings.TAG_CACHE_TTL,
        )

    engine = create_db_engine(settings.DATABASE_URL)
    return DatabaseContentHost(create_session_factory(engine))


def get_default_host() -> ContentHost:
    """
    Get the process-wide default host, building it on first use.

    The first build also configures logging from LOG_LEVEL and LOG_JSON.

    Returns:
        Default ContentHost instance
    """
    global _default_host
    if _default_host is None:
        setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
        _default_host = create_host_from_settings()
        logger.info("default_host_created", host=_default_host.name)
    return _default_host


def set_default_host(host: Optional[ContentHost]) -> None:
    """Replace the default host; None resets it to the settings-built one."""
    global _default_host
    _default_host = host


__all__ = [
    "ContentHost",
    "DatabaseContentHost",
    "WordPressRestHost",
    "create_host_from_settings",
    "get_default_host",
    "set_default_host",
]
